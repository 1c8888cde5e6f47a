"""
Decodificación de secciones de un replay según su categoría.

- Secciones de una sola pieza (details, initdata, attributes): un valor.
- Flujos de eventos (game, message, tracker): el decoder es un generador;
  se consume entero en una lista, o se reparte en grupos si hay filtros.
- Datos crudos (battlelobby): solo se normalizan los bytes.

Los errores del decoder no se capturan aquí: llegan al llamador.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Sequence

from hots_replay_analyzer.exceptions import UnsupportedSectionError
from hots_replay_analyzer.filters import Criterion, bucket_events
from hots_replay_analyzer.protocols import DecoderSet
from hots_replay_analyzer.sections import (
    HEADER,
    RAW_SECTIONS,
    SINGLE_SHOT_SECTIONS,
    STREAMING_SECTIONS,
    Section,
)
from hots_replay_analyzer.utils import normalize_value

if TYPE_CHECKING:
    from hots_replay_analyzer.archive import Archive

logger = logging.getLogger(__name__)


def to_section(name: str | Section) -> Section:
    """Como ``Section.parse`` pero con el error propio del analizador."""
    try:
        return Section.parse(name)
    except ValueError:
        raise UnsupportedSectionError(f"Sección desconocida: {name!r}") from None


def decode_buffer(protocol: DecoderSet, section: str | Section, buffer: bytes) -> Any:
    """
    Decodifica el contenido de una sección con un protocolo dado, sin caché.

    Args:
        protocol: Decoders del build del replay.
        section: Sección a la que pertenece ``buffer``.
        buffer: Bytes de la sección tal como salen del contenedor.

    Returns:
        Valor normalizado; lista de eventos para los flujos de eventos.
    """
    section = to_section(section)
    if section in STREAMING_SECTIONS:
        return [normalize_value(event) for event in protocol.decode(section, buffer)]
    if section in SINGLE_SHOT_SECTIONS or section == HEADER:
        return normalize_value(protocol.decode(section, buffer))
    if section in RAW_SECTIONS:
        return normalize_value(buffer)
    raise UnsupportedSectionError(f"Sección sin decoder: {section}")


def decode_section(
    archive: Archive | Exception,
    section: str | Section,
    filters: Sequence[Criterion] | None = None,
) -> Any:
    """
    Devuelve el contenido decodificado de una sección del replay.

    Args:
        archive: Archive abierto, o el error devuelto al intentar abrirlo.
        section: Sección pedida.
        filters: Criterios para repartir un flujo de eventos en grupos. Solo
            se aplican a los flujos de eventos; el resultado filtrado no se
            guarda en caché.

    Returns:
        Valor normalizado, lista de grupos si hay filtros, o None si el
        replay no se pudo abrir, su protocolo no existe o no se ha resuelto.
    """
    if isinstance(archive, Exception):
        logger.info("Replay no disponible: %s", archive)
        return None
    if archive.error:
        logger.info("Replay no disponible: %s", archive.error)
        return None
    if archive.protocol is None:
        logger.info("Replay no disponible: protocolo sin resolver")
        return None

    section = to_section(section)
    streaming = section in STREAMING_SECTIONS

    if section in archive.data and not (streaming and filters is not None):
        return archive.data[section]

    contents = archive.read_file(section)
    if streaming and filters is not None:
        events = archive.protocol.decode(section, contents)
        return bucket_events(events, filters, normalize_value)

    data = archive.data[section] = decode_buffer(archive.protocol, section, contents)
    return data
