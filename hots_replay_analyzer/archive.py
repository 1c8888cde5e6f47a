"""
Replays abiertos y caché de último replay usado.

``ArchiveCache`` guarda un único replay (el último abierto). Pedir de nuevo
el mismo archivo devuelve el mismo ``Archive`` con sus secciones ya
decodificadas; abrir otro lo reemplaza.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Sequence

from hots_replay_analyzer.container import (
    is_container,
    open_container,
    read_member,
    read_user_data_header,
)
from hots_replay_analyzer.decoder import decode_section
from hots_replay_analyzer.exceptions import InvalidReplayError, MissingDataError
from hots_replay_analyzer.filters import Criterion
from hots_replay_analyzer.header_parser import resolve_protocol
from hots_replay_analyzer.protocols import DecoderSet, ProtocolRegistry, default_registry
from hots_replay_analyzer.sections import HEADER, Section

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Archive:
    """Un replay abierto: contenedor, protocolo resuelto y secciones decodificadas."""

    container: Any
    filename: Path | None = None
    base_build: int | None = None
    protocol: DecoderSet | None = None
    error: str | None = None
    data: dict[Section, Any] = field(default_factory=dict)

    @property
    def header(self) -> dict | None:
        return self.data.get(HEADER)

    def read_file(self, section: str | Section) -> bytes:
        """Bytes de una sección tal como están en el contenedor."""
        if section == HEADER:
            return read_user_data_header(self.container)
        return read_member(self.container, section)

    def get(
        self,
        section: str | Section,
        filters: Sequence[Criterion] | None = None,
    ) -> Any:
        """Atajo de ``decode_section`` sobre este replay."""
        return decode_section(self, section, filters)


class ArchiveCache:
    """
    Caché de un solo replay.

    Args:
        registry: Registro de protocolos; por defecto el compartido.
        opener: Función ruta -> contenedor; por defecto ``open_container`` (mpyq).
    """

    def __init__(
        self,
        registry: ProtocolRegistry | None = None,
        opener: Callable[[Path], Any] = open_container,
    ):
        self._registry = registry
        self._opener = opener
        self.current: Archive | None = None

    @property
    def registry(self) -> ProtocolRegistry:
        if self._registry is None:
            self._registry = default_registry()
        return self._registry

    def clear(self) -> None:
        self.current = None

    def _is_cached(self, file: Any) -> bool:
        current = self.current
        if current is None:
            return False
        if isinstance(file, (str, os.PathLike)):
            return current.filename is not None and current.filename == Path(file).absolute()
        return file is current.container

    def open(
        self, file: Any, bypass_cache: bool = False
    ) -> Archive | InvalidReplayError:
        """
        Abre un replay, o lo devuelve de la caché si es el último usado.

        Args:
            file: Ruta (relativa al directorio actual o absoluta), contenedor
                ya abierto, o un ``Archive``.
            bypass_cache: Si es True, vuelve a leer el replay aunque esté en caché.

        Returns:
            El ``Archive``, o un ``InvalidReplayError`` (devuelto, no lanzado)
            si no se pudo abrir. Si el build no tiene protocolo, el Archive
            se devuelve con ``error`` informado.
        """
        if isinstance(file, Archive):
            return file

        if not bypass_cache and self._is_cached(file):
            logger.debug("Replay en caché: %s", self.current.filename or file)
            return self.current

        if isinstance(file, (str, os.PathLike)):
            path = Path(file).absolute()
            try:
                container = self._opener(path)
            except InvalidReplayError as e:
                logger.debug("No se pudo abrir %s: %s", path, e)
                return e
            except Exception as e:
                error = InvalidReplayError(f"No se pudo abrir el replay {path}: {e}")
                error.__cause__ = e
                logger.debug("%s", error)
                return error
            archive = Archive(container=container, filename=path)
        elif is_container(file):
            archive = Archive(container=file)
        else:
            error = InvalidReplayError(f"Parámetro no soportado: {file!r}")
            logger.debug("%s", error)
            return error

        try:
            resolve_protocol(archive, self.registry)
        except MissingDataError as e:
            error = InvalidReplayError(f"El archivo no parece un replay: {e}")
            error.__cause__ = e
            logger.debug("%s", error)
            return error

        self.current = archive
        return archive

    def get(
        self,
        section: str | Section,
        file: Any,
        filters: Sequence[Criterion] | None = None,
    ) -> Any:
        """
        Contenido decodificado de una sección de un replay.

        ``file`` puede ser cualquier cosa que acepte ``open`` o el error que
        devolvió; un error o un protocolo inexistente dan None.
        """
        if not isinstance(file, Exception):
            file = self.open(file)
        return decode_section(file, section, filters)
