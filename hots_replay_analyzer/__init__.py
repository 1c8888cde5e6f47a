"""
Lector de replays de Heroes of the Storm (.StormReplay).

Resuelve la versión de protocolo de cada replay, decodifica sus secciones
con los decoders de ``heroprotocol`` y devuelve datos normalizados (texto en
lugar de bytes) listos para JSON, API, bases de datos, etc.
"""

__version__ = "0.1.0"

from hots_replay_analyzer.sections import (
    Section,
    HEADER,
    DETAILS,
    INITDATA,
    GAME_EVENTS,
    MESSAGE_EVENTS,
    TRACKER_EVENTS,
    ATTRIBUTES_EVENTS,
    RAW_DATA,
)
from hots_replay_analyzer.archive import Archive, ArchiveCache
from hots_replay_analyzer.protocols import (
    DecoderSet,
    ProtocolRegistry,
    decoder_library_version,
    default_registry,
)
from hots_replay_analyzer.parser import open_replay, get, parse_header, parse_file
from hots_replay_analyzer.utils import normalize_value
from hots_replay_analyzer.exceptions import (
    ReplayAnalyzerError,
    InvalidReplayError,
    CorruptReplayError,
    MissingDataError,
    ProtocolNotFoundError,
    UnsupportedSectionError,
)

# versión de heroprotocol instalada (None si falta)
protocol_version = decoder_library_version()

__all__ = [
    "Section",
    "HEADER",
    "DETAILS",
    "INITDATA",
    "GAME_EVENTS",
    "MESSAGE_EVENTS",
    "TRACKER_EVENTS",
    "ATTRIBUTES_EVENTS",
    "RAW_DATA",
    "Archive",
    "ArchiveCache",
    "DecoderSet",
    "ProtocolRegistry",
    "default_registry",
    "decoder_library_version",
    "protocol_version",
    "open_replay",
    "get",
    "parse_header",
    "parse_file",
    "normalize_value",
    "ReplayAnalyzerError",
    "InvalidReplayError",
    "CorruptReplayError",
    "MissingDataError",
    "ProtocolNotFoundError",
    "UnsupportedSectionError",
]
