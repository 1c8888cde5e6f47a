"""
Secciones (archivos internos) de un replay de Heroes of the Storm.

Los valores de texto son parte del contrato público: otras herramientas
nombran las secciones con estas mismas cadenas.
"""

from __future__ import annotations

from enum import Enum


class Section(str, Enum):
    HEADER = "header"
    DETAILS = "replay.details"
    INITDATA = "replay.initdata"
    GAME_EVENTS = "replay.game.events"
    MESSAGE_EVENTS = "replay.message.events"
    TRACKER_EVENTS = "replay.tracker.events"
    ATTRIBUTES_EVENTS = "replay.attributes.events"
    RAW_DATA = "replay.server.battlelobby"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str | Section) -> Section:
        """
        Convierte un nombre de sección en ``Section``.

        Raises:
            ValueError: Si el nombre no corresponde a ninguna sección.
        """
        if isinstance(name, cls):
            return name
        return cls(name)


HEADER = Section.HEADER
DETAILS = Section.DETAILS
INITDATA = Section.INITDATA
GAME_EVENTS = Section.GAME_EVENTS
MESSAGE_EVENTS = Section.MESSAGE_EVENTS
TRACKER_EVENTS = Section.TRACKER_EVENTS
ATTRIBUTES_EVENTS = Section.ATTRIBUTES_EVENTS
RAW_DATA = Section.RAW_DATA

# Se decodifican de una vez y devuelven un único valor
SINGLE_SHOT_SECTIONS = frozenset((DETAILS, INITDATA, ATTRIBUTES_EVENTS))
# El decoder devuelve un generador de eventos
STREAMING_SECTIONS = frozenset((GAME_EVENTS, MESSAGE_EVENTS, TRACKER_EVENTS))
# Bytes tal cual, sin decodificación estructural
RAW_SECTIONS = frozenset((RAW_DATA,))

# Nombre de la función de decodificación en cada módulo de protocolo
DECODER_NAMES = {
    HEADER: "decode_replay_header",
    DETAILS: "decode_replay_details",
    INITDATA: "decode_replay_initdata",
    GAME_EVENTS: "decode_replay_game_events",
    MESSAGE_EVENTS: "decode_replay_message_events",
    TRACKER_EVENTS: "decode_replay_tracker_events",
    ATTRIBUTES_EVENTS: "decode_replay_attributes_events",
}
