"""
Lectura del header de un replay y resolución de su versión de protocolo.

El campo de versión del header tiene la misma disposición en todos los
builds, así que se decodifica primero con un build base (bootstrap) para
obtener ``m_baseBuild`` y luego se vuelve a decodificar con el protocolo
propio del replay, que puede exponer más campos.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from hots_replay_analyzer import config
from hots_replay_analyzer.container import read_user_data_header
from hots_replay_analyzer.exceptions import ProtocolNotFoundError
from hots_replay_analyzer.protocols import DecoderSet, ProtocolRegistry, default_registry
from hots_replay_analyzer.sections import HEADER
from hots_replay_analyzer.utils import get_path, normalize_value

if TYPE_CHECKING:
    from hots_replay_analyzer.archive import Archive

logger = logging.getLogger(__name__)


def bootstrap_protocol(registry: ProtocolRegistry) -> DecoderSet:
    """
    Protocolo base con el que se lee el header de cualquier replay.

    Raises:
        ProtocolNotFoundError: Si el build base no está en el registro.
    """
    build = config.get_bootstrap_build()
    protocol = registry.resolve(build)
    if protocol is None:
        raise ProtocolNotFoundError(build)
    return protocol


def decode_header(protocol: DecoderSet, content: bytes) -> dict[str, Any]:
    """Decodifica y normaliza el header con el protocolo dado."""
    return normalize_value(protocol.decode(HEADER, content))


def get_base_build(header: dict[str, Any]) -> int | None:
    """Build del replay (``m_version.m_baseBuild``) o None si no está."""
    return get_path(header, "m_version", "m_baseBuild")


def resolve_protocol(archive: Archive, registry: ProtocolRegistry) -> Archive:
    """
    Decodifica el header del archivo y le asigna su protocolo.

    Si no hay protocolo para el build, deja ``archive.error`` con el motivo;
    el header leído con el protocolo base queda disponible igualmente.

    Args:
        archive: Archive recién abierto (sin header).
        registry: Registro de protocolos.

    Returns:
        El mismo ``archive``, modificado.
    """
    content = read_user_data_header(archive.container)
    header = decode_header(bootstrap_protocol(registry), content)
    archive.data[HEADER] = header
    archive.base_build = get_base_build(header)

    protocol = registry.resolve(archive.base_build)
    if protocol is None:
        archive.protocol = None
        archive.error = f"protocol {archive.base_build} not found"
        logger.warning("%s: %s", archive.filename or "replay", archive.error)
        return archive

    # El header según el protocolo propio tiene los tipos correctos de ese build
    archive.data[HEADER] = decode_header(protocol, content)
    archive.protocol = protocol
    archive.error = None
    return archive


def parse_header(buffer: bytes, registry: ProtocolRegistry | None = None) -> dict[str, Any]:
    """
    Decodifica un header suelto (user data header del MPQ) con el protocolo base.

    Args:
        buffer: Contenido del user data header.
        registry: Registro de protocolos (por defecto el compartido).

    Returns:
        Header normalizado.
    """
    registry = registry if registry is not None else default_registry()
    return decode_header(bootstrap_protocol(registry), buffer)
