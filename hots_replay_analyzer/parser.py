"""
API de alto nivel para leer replays de Heroes of the Storm (.StormReplay).

Las funciones ``open_replay`` y ``get`` usan una caché compartida por todo
el proceso que recuerda solo el último replay abierto (el último ``open``
gana). Para tener una caché propia, crear un ``ArchiveCache`` y pasarlo
con ``cache=``.

Ejemplo::

    replay = open_replay("partida.StormReplay")
    details = get(DETAILS, replay)
    kills, deaths = get(TRACKER_EVENTS, replay, [{"m_killerPlayerId": 1}, {"m_playerId": 1}])
"""

from __future__ import annotations

from typing import Any, Sequence

from hots_replay_analyzer.archive import Archive, ArchiveCache
from hots_replay_analyzer.decoder import decode_buffer, to_section
from hots_replay_analyzer.exceptions import InvalidReplayError
from hots_replay_analyzer.filters import Criterion
from hots_replay_analyzer.header_parser import parse_header as _parse_header
from hots_replay_analyzer.protocols import ProtocolRegistry, default_registry
from hots_replay_analyzer.sections import Section

_default_cache: ArchiveCache | None = None


def default_cache() -> ArchiveCache:
    """Caché compartida por las funciones del módulo."""
    global _default_cache

    if _default_cache is None:
        _default_cache = ArchiveCache()
    return _default_cache


def open_replay(
    file: Any, bypass_cache: bool = False, cache: ArchiveCache | None = None
) -> Archive | InvalidReplayError:
    """
    Abre un replay y resuelve su versión de protocolo.

    Args:
        file: Ruta al .StormReplay o contenedor mpyq ya abierto.
        bypass_cache: Volver a leer aunque sea el último replay abierto.
        cache: Caché a usar (por defecto la compartida).

    Returns:
        ``Archive``, o ``InvalidReplayError`` si no se pudo abrir (no se lanza:
        comprobar el tipo). Un build sin protocolo deja ``archive.error``.
    """
    return (cache or default_cache()).open(file, bypass_cache)


def get(
    section: str | Section,
    file: Any,
    filters: Sequence[Criterion] | None = None,
    cache: ArchiveCache | None = None,
) -> Any:
    """
    Devuelve una sección decodificada del replay.

    Args:
        section: Nombre de la sección (``DETAILS``, ``TRACKER_EVENTS``...).
        file: ``Archive``, ruta, contenedor o el error devuelto por ``open_replay``.
        filters: Lista de criterios ``{campo: valor}``; solo para flujos de
            eventos. Devuelve un grupo de eventos por criterio.
        cache: Caché a usar (por defecto la compartida).

    Returns:
        Datos normalizados, o None si el replay no se pudo abrir o su
        protocolo no existe (se registra en el log).

    Raises:
        MissingDataError: La sección no está en el contenedor.
        UnsupportedSectionError: Sección desconocida.
        Exception: Cualquier error del decoder del protocolo.
    """
    return (cache or default_cache()).get(section, file, filters)


def parse_header(buffer: bytes, registry: ProtocolRegistry | None = None) -> dict:
    """
    Decodifica un user data header suelto con el protocolo base.

    Args:
        buffer: Contenido del header del contenedor MPQ.

    Returns:
        Header normalizado (incluye ``m_version.m_baseBuild``).
    """
    return _parse_header(buffer, registry)


def parse_file(
    section: str | Section,
    buffer: bytes,
    build: Any,
    registry: ProtocolRegistry | None = None,
) -> Any:
    """
    Decodifica el contenido de una sección con el protocolo de un build dado.

    No usa caché ni filtros.

    Args:
        section: Sección a la que pertenece ``buffer``.
        buffer: Bytes extraídos del contenedor.
        build: Build con el que decodificar (int o texto numérico).
        registry: Registro de protocolos (por defecto el compartido).

    Returns:
        Datos normalizados, o None si no hay protocolo para ``build``.
    """
    registry = registry if registry is not None else default_registry()
    protocol = registry.resolve(build)
    if protocol is None:
        return None
    return decode_buffer(protocol, to_section(section), buffer)
