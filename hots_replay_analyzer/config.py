"""
Configuración del analizador mediante variables de entorno.

Variables:
    HOTS_REPLAY_BOOTSTRAP_BUILD: Build usado para leer el header antes de
        conocer la versión del replay (por defecto 29406).
    HOTS_REPLAY_PROTOCOL_PACKAGE: Paquete con los módulos ``protocolNNNNN``
        (por defecto ``heroprotocol.versions``).
    HOTS_REPLAY_LOG_LEVEL: Nivel de logging de la CLI (por defecto WARNING).
"""

import os

DEFAULT_BOOTSTRAP_BUILD = 29406
DEFAULT_PROTOCOL_PACKAGE = "heroprotocol.versions"
DEFAULT_LOG_LEVEL = "WARNING"


def get_bootstrap_build() -> int:
    """Build con el que se decodifica el header antes de conocer su versión.

    Raises:
        ValueError: Si HOTS_REPLAY_BOOTSTRAP_BUILD no es un entero.
    """
    env_value = os.environ.get("HOTS_REPLAY_BOOTSTRAP_BUILD")
    if not env_value:
        return DEFAULT_BOOTSTRAP_BUILD
    try:
        return int(env_value)
    except ValueError:
        raise ValueError(
            f"HOTS_REPLAY_BOOTSTRAP_BUILD debe ser un número de build: {env_value!r}"
        ) from None


def get_protocol_package() -> str:
    """Paquete donde se buscan los módulos de protocolo."""
    return os.environ.get("HOTS_REPLAY_PROTOCOL_PACKAGE") or DEFAULT_PROTOCOL_PACKAGE


def get_log_level() -> str:
    return (os.environ.get("HOTS_REPLAY_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
