"""
Utilidades para el analizador de replays.

- Normalización de valores decodificados (bytes -> texto).
- Helpers para navegar estructuras decodificadas (dict/list anidados).
"""

from typing import Any


def normalize_value(data: Any) -> Any:
    """
    Convierte recursivamente los valores binarios de una estructura a texto.

    Los decoders de protocolo devuelven cadenas como ``bytes``; para poder
    serializar el resultado (JSON, API, etc.) se pasan a ``str``.

    - ``bytes``/``bytearray`` -> ``str`` (UTF-8, secuencias inválidas reemplazadas).
    - Listas y tuplas: elemento a elemento, conservando orden, longitud y tipo.
    - Dicts: valor a valor *in place*, conservando las claves.
    - Cualquier otro valor se devuelve sin cambios.

    Aplicarla dos veces da el mismo resultado que aplicarla una.

    Args:
        data: Valor devuelto por un decoder.

    Returns:
        El valor normalizado (el mismo objeto en el caso de dicts).
    """
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8", errors="replace")
    if isinstance(data, list):
        return [normalize_value(item) for item in data]
    if isinstance(data, tuple):
        return tuple(normalize_value(item) for item in data)
    if isinstance(data, dict):
        for key in data:
            data[key] = normalize_value(data[key])
    return data


def get_path(data: Any, *keys: Any, default: Any = None) -> Any:
    """
    Obtiene un valor anidado siguiendo una secuencia de claves.

    Args:
        data: Estructura decodificada (dicts anidados).
        keys: Claves a seguir, p. ej. ``"m_version", "m_baseBuild"``.
        default: Valor si alguna clave no existe.

    Returns:
        El valor encontrado o ``default``.
    """
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current
