import copy
from pathlib import Path
from types import SimpleNamespace

import pytest

from hots_replay_analyzer.archive import ArchiveCache
from hots_replay_analyzer.protocols import ProtocolRegistry

BOOTSTRAP_BUILD = 29406
REPLAY_BUILD = 70000
UNKNOWN_BUILD = 12345

SIGNATURE = b"Heroes of the Storm replay\x1b11"

TRACKER_EVENTS = [
    {"_event": b"NNet.Replay.Tracker.SUnitBornEvent", "_gameloop": 1, "m_playerId": 1, "m_unitTypeName": b"HeroJaina"},
    {"_event": b"NNet.Replay.Tracker.SUnitBornEvent", "_gameloop": 2, "m_playerId": 2, "m_unitTypeName": b"HeroMuradin"},
    {"_event": b"NNet.Replay.Tracker.SStatGameEvent", "_gameloop": 3, "m_eventName": b"PlayerInit"},
    {"_event": b"NNet.Replay.Tracker.SUnitDiedEvent", "_gameloop": 4, "m_playerId": 1, "m_killerPlayerId": 2},
    {"_event": b"NNet.Replay.Tracker.SUnitDiedEvent", "_gameloop": 5, "m_playerId": 3, "m_killerPlayerId": 1},
]


def header_content(build: int) -> bytes:
    """User data header falso: los decoders falsos leen el build de aquí."""
    return b"build:%d" % build


class FakeContainer:
    """Contenedor MPQ falso con la misma interfaz que ``mpyq.MPQArchive``."""

    def __init__(self, build: int, files=None):
        self.header = {"user_data_header": {"content": header_content(build)}}
        self.files = dict(files or {})
        self.reads = []

    def read_file(self, filename):
        self.reads.append(filename)
        return self.files.get(filename)


class CallCounter:
    def __init__(self, func):
        self.func = func
        self.calls = 0

    def __call__(self, contents):
        self.calls += 1
        return self.func(contents)


def _base_header(contents: bytes) -> dict:
    build = int(contents.split(b":")[1])
    return {
        "m_signature": SIGNATURE,
        "m_version": {"m_flags": 1, "m_major": 2, "m_minor": 40, "m_revision": 0, "m_build": build, "m_baseBuild": build},
        "m_type": 2,
        "m_elapsedGameLoops": 24000,
    }


def make_protocol(build: int, tracker_events=TRACKER_EVENTS) -> SimpleNamespace:
    """Módulo de protocolo falso con las funciones ``decode_replay_*``."""

    def decode_replay_header(contents):
        header = _base_header(contents)
        header["m_useScaledTime"] = False
        header["m_ngdpRootKey"] = {"m_data": b"\x00key"}
        header["m_protocolBuild"] = build
        return header

    def decode_replay_details(contents):
        return {
            "m_title": contents,
            "m_playerList": [
                {"m_name": b"Jugador1", "m_hero": b"Jaina", "m_teamId": 0},
                {"m_name": b"Jugador2", "m_hero": b"Muradin", "m_teamId": 1},
            ],
            "m_isBlizzardMap": True,
        }

    def decode_replay_initdata(contents):
        return {"m_syncLobbyState": {"m_gameDescription": {"m_gameOptions": {"m_competitive": False}}}}

    def decode_replay_attributes_events(contents):
        return {"source": 0, "mapNamespace": 999, "scopes": {16: {4010: [{"value": b"Humn"}]}}}

    def events_from(events):
        def decode(contents):
            for event in events:
                yield copy.deepcopy(event)
        return decode

    return SimpleNamespace(
        decode_replay_header=CallCounter(decode_replay_header),
        decode_replay_details=CallCounter(decode_replay_details),
        decode_replay_initdata=CallCounter(decode_replay_initdata),
        decode_replay_attributes_events=CallCounter(decode_replay_attributes_events),
        decode_replay_game_events=CallCounter(events_from([{"_event": b"NNet.Game.SCameraUpdateEvent", "_userid": {"m_userId": 0}}])),
        decode_replay_message_events=CallCounter(events_from([{"_event": b"NNet.Game.SChatMessage", "m_string": b"gg"}])),
        decode_replay_tracker_events=CallCounter(events_from(tracker_events)),
    )


def make_bootstrap() -> SimpleNamespace:
    return SimpleNamespace(decode_replay_header=CallCounter(_base_header))


REPLAY_FILES = {
    "replay.details": b"Cursed Hollow",
    "replay.initdata": b"initdata",
    "replay.game.events": b"game",
    "replay.message.events": b"message",
    "replay.tracker.events": b"tracker",
    "replay.attributes.events": b"attributes",
    "replay.server.battlelobby": b"lobby\xffdata",
}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("HOTS_REPLAY_BOOTSTRAP_BUILD", "HOTS_REPLAY_PROTOCOL_PACKAGE", "HOTS_REPLAY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def protocol():
    return make_protocol(REPLAY_BUILD)


@pytest.fixture
def registry(protocol):
    return ProtocolRegistry({BOOTSTRAP_BUILD: make_bootstrap(), REPLAY_BUILD: protocol})


@pytest.fixture
def containers():
    """Contenedores creados por el opener falso, en orden de apertura."""
    return []


@pytest.fixture
def opener(containers):
    def open_fake(path: Path):
        build = UNKNOWN_BUILD if "unknown" in path.name else REPLAY_BUILD
        container = FakeContainer(build, REPLAY_FILES)
        containers.append(container)
        return container

    return open_fake


@pytest.fixture
def cache(registry, opener):
    return ArchiveCache(registry, opener=opener)


@pytest.fixture
def replay_path(tmp_path):
    path = tmp_path / "partida.StormReplay"
    path.write_bytes(b"MPQ\x1b")
    return path


@pytest.fixture
def unknown_replay_path(tmp_path):
    path = tmp_path / "unknown.StormReplay"
    path.write_bytes(b"MPQ\x1b")
    return path
