"""
Punto de entrada por línea de comandos para el lector de replays.

Uso:
    python -m hots_replay_analyzer partida.StormReplay
    python -m hots_replay_analyzer partida.StormReplay --trackerevents -o eventos.json
    python -m hots_replay_analyzer partida.StormReplay --trackerevents --filter m_playerId=1 --filter m_playerId=2
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from hots_replay_analyzer import config
from hots_replay_analyzer.archive import Archive
from hots_replay_analyzer.parser import get, open_replay
from hots_replay_analyzer.sections import (
    ATTRIBUTES_EVENTS,
    DETAILS,
    GAME_EVENTS,
    HEADER,
    INITDATA,
    MESSAGE_EVENTS,
    RAW_DATA,
    STREAMING_SECTIONS,
    TRACKER_EVENTS,
)
from hots_replay_analyzer.exceptions import (
    ReplayAnalyzerError,
    InvalidReplayError,
    CorruptReplayError,
    MissingDataError,
)

# opción de la CLI -> sección
SECTION_FLAGS = {
    "header": HEADER,
    "details": DETAILS,
    "initdata": INITDATA,
    "gameevents": GAME_EVENTS,
    "messageevents": MESSAGE_EVENTS,
    "trackerevents": TRACKER_EVENTS,
    "attributeevents": ATTRIBUTES_EVENTS,
    "lobby": RAW_DATA,
}


def parse_criterion(text: str) -> dict[str, Any]:
    """
    Convierte ``"campo=valor,campo2=valor2"`` en un criterio de filtro.

    Los valores se interpretan como JSON (números, true/false, null) y si
    no lo son se dejan como texto.

    Raises:
        argparse.ArgumentTypeError: Si algún par no tiene ``=``.
    """
    criterion: dict[str, Any] = {}
    for pair in text.split(","):
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Filtro inválido (se espera campo=valor): {pair!r}")
        raw = raw.strip()
        try:
            criterion[key] = json.loads(raw)
        except ValueError:
            criterion[key] = raw
    return criterion


def extract_sections(archive: Archive, sections, filters=None) -> dict[str, Any]:
    """
    Decodifica varias secciones de un replay en un dict nombre -> datos.

    Los filtros solo se aplican a los flujos de eventos.

    Raises:
        CorruptReplayError: Si el decoder del protocolo falla.
        ReplayAnalyzerError: Sección ausente o no soportada.
    """
    result: dict[str, Any] = {}
    for section in sections:
        section_filters = filters if section in STREAMING_SECTIONS else None
        try:
            result[section.value] = get(section, archive, section_filters)
        except ReplayAnalyzerError:
            raise
        except Exception as e:
            raise CorruptReplayError(f"Error al decodificar {section}: {e}") from e
    return result


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extrae secciones de un replay de Heroes of the Storm y las guarda como JSON."
    )
    parser.add_argument(
        "replay",
        type=Path,
        help="Ruta al archivo .StormReplay",
    )
    parser.add_argument("--header", action="store_true", help="header del protocolo")
    parser.add_argument("--details", action="store_true", help="detalles de la partida")
    parser.add_argument("--initdata", action="store_true", help="datos iniciales")
    parser.add_argument("--gameevents", action="store_true", help="eventos de juego")
    parser.add_argument("--messageevents", action="store_true", help="eventos de mensajes")
    parser.add_argument("--trackerevents", action="store_true", help="eventos del tracker")
    parser.add_argument("--attributeevents", action="store_true", help="atributos")
    parser.add_argument("--lobby", action="store_true", help="datos crudos del battlelobby")
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        type=parse_criterion,
        default=None,
        metavar="CAMPO=VALOR[,CAMPO=VALOR]",
        help="Criterio para los eventos (repetible: un grupo por criterio)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Archivo de salida JSON (por defecto: salida estándar)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Indentación del JSON (0 = compacto). Por defecto: 2",
    )
    return parser


def main(argv=None) -> int:
    """Ejecuta el lector desde la CLI. Retorna 0 en éxito, 1 en error."""
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=config.get_log_level(), format="%(levelname)s %(name)s: %(message)s")

    sections = [section for flag, section in SECTION_FLAGS.items() if getattr(args, flag)]
    if not sections:
        sections = [HEADER, DETAILS]

    archive = open_replay(args.replay)
    if isinstance(archive, InvalidReplayError):
        print(f"Error: Archivo inválido - {archive}", file=sys.stderr)
        return 1
    if archive.error:
        print(f"Error: {archive.error}", file=sys.stderr)
        return 1

    try:
        result = extract_sections(archive, sections, args.filters)
    except MissingDataError as e:
        print(f"Error: Faltan datos en el replay - {e}", file=sys.stderr)
        return 1
    except CorruptReplayError as e:
        print(f"Error: Replay corrupto o no decodificable - {e}", file=sys.stderr)
        return 1
    except ReplayAnalyzerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    text = json.dumps(result, ensure_ascii=False, indent=args.indent or None, default=str)
    if args.output is None:
        print(text)
        return 0

    try:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        print(f"Error: No se pudo escribir {args.output} - {e}", file=sys.stderr)
        return 1

    print(f"Resultado guardado en: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
