"""
Acceso al contenedor MPQ de un replay (``.StormReplay``) mediante mpyq.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import mpyq

from hots_replay_analyzer.exceptions import InvalidReplayError, MissingDataError


def open_container(path: str | Path) -> mpyq.MPQArchive:
    """
    Abre el archivo MPQ del replay.

    Raises:
        InvalidReplayError: Archivo no encontrado.
        Exception: Cualquier error de mpyq si el contenedor es inválido.
    """
    path = Path(path)
    if not path.exists():
        raise InvalidReplayError(f"Archivo no encontrado: {path}")
    return mpyq.MPQArchive(str(path))


def is_container(obj: Any) -> bool:
    """Indica si ``obj`` se comporta como un contenedor ya abierto."""
    return hasattr(obj, "read_file") and hasattr(obj, "header")


def read_user_data_header(container: Any) -> bytes:
    """
    Bloque de header embebido en el contenedor (antes de la tabla MPQ).

    Es lo que se decodifica con el protocolo base para conocer el build.
    """
    user_data = (container.header or {}).get("user_data_header")
    if not user_data or user_data.get("content") is None:
        raise MissingDataError("El contenedor no tiene user data header")
    return user_data["content"]


def read_member(container: Any, name: str) -> bytes:
    """
    Lee un archivo interno del contenedor.

    Raises:
        MissingDataError: Si el archivo no existe en el contenedor.
    """
    contents = container.read_file(str(name))
    if contents is None:
        raise MissingDataError(f"Sección no encontrada en el replay: {name}")
    return contents
