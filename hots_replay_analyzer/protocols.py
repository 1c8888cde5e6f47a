"""
Registro de versiones del protocolo de replays.

Cada build del juego tiene su propio módulo de decoders (``protocolNNNNN``
en ``heroprotocol.versions``). El registro asocia número de build -> módulo
de forma explícita; los módulos descubiertos en un paquete se importan la
primera vez que se piden, porque hay cientos y cada uno es grande.
"""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
import pkgutil
import re
from typing import Any, Callable, Iterator, Mapping

from hots_replay_analyzer import config
from hots_replay_analyzer.exceptions import UnsupportedSectionError
from hots_replay_analyzer.sections import DECODER_NAMES, Section

logger = logging.getLogger(__name__)

_PROTOCOL_MODULE_RE = re.compile(r"^protocol(\d+)$")


class DecoderSet:
    """Decoders de una versión concreta del protocolo (una función por sección)."""

    __slots__ = ("build", "module")

    def __init__(self, build: int, module: Any):
        self.build = build
        self.module = module

    def decoder_for(self, section: str | Section) -> Callable[[bytes], Any]:
        """
        Devuelve la función que decodifica ``section`` en esta versión.

        Raises:
            UnsupportedSectionError: Sección desconocida, sin decoder propio
                (datos crudos) o que el módulo no implementa.
        """
        try:
            section = Section.parse(section)
        except ValueError:
            raise UnsupportedSectionError(f"Sección desconocida: {section!r}") from None
        name = DECODER_NAMES.get(section)
        func = getattr(self.module, name, None) if name else None
        if func is None:
            raise UnsupportedSectionError(
                f"El protocolo {self.build} no sabe decodificar {section}"
            )
        return func

    def decode(self, section: str | Section, contents: bytes) -> Any:
        """Decodifica ``contents`` como la sección indicada (sin normalizar)."""
        return self.decoder_for(section)(contents)

    def __repr__(self) -> str:
        return f"DecoderSet(build={self.build})"


class ProtocolRegistry:
    """Mapa build -> ``DecoderSet`` con resultado explícito si no existe."""

    def __init__(self, protocols: Mapping[int, Any] | None = None):
        self._protocols: dict[int, DecoderSet] = {}
        # build -> nombre de módulo todavía sin importar
        self._pending: dict[int, str] = {}
        for build, module in (protocols or {}).items():
            self.register(build, module)

    def register(self, build: int, protocol: Any) -> DecoderSet:
        """
        Registra los decoders de un build.

        Args:
            build: Número de build (``m_baseBuild``).
            protocol: Módulo (u objeto) con funciones ``decode_replay_*``,
                o un ``DecoderSet`` ya construido.

        Returns:
            El ``DecoderSet`` registrado.
        """
        build = int(build)
        if not isinstance(protocol, DecoderSet):
            protocol = DecoderSet(build, protocol)
        self._protocols[build] = protocol
        self._pending.pop(build, None)
        return protocol

    def register_module(self, build: int, module_name: str) -> None:
        """Registra un módulo por nombre; se importa en el primer ``resolve``."""
        build = int(build)
        if build not in self._protocols:
            self._pending[build] = module_name

    def discover(self, package: str) -> int:
        """
        Registra todos los módulos ``protocolNNNNN`` de un paquete sin importarlos.

        Args:
            package: Nombre importable del paquete (p. ej. ``heroprotocol.versions``).

        Returns:
            Número de builds encontrados.

        Raises:
            ImportError: Si el paquete no está instalado.
        """
        pkg = importlib.import_module(package)
        found = 0
        for module_info in pkgutil.iter_modules(getattr(pkg, "__path__", [])):
            match = _PROTOCOL_MODULE_RE.match(module_info.name)
            if not match:
                continue
            self.register_module(int(match.group(1)), f"{package}.{module_info.name}")
            found += 1
        logger.debug("%d protocolos encontrados en %s", found, package)
        return found

    def resolve(self, build: Any) -> DecoderSet | None:
        """
        Busca los decoders de un build.

        Args:
            build: Número de build (int o texto numérico).

        Returns:
            El ``DecoderSet`` o ``None`` si el build no está registrado
            (o no es un número).
        """
        try:
            build = int(build)
        except (TypeError, ValueError):
            return None
        protocol = self._protocols.get(build)
        if protocol is not None:
            return protocol
        module_name = self._pending.get(build)
        if module_name is None:
            return None
        return self.register(build, importlib.import_module(module_name))

    def builds(self) -> list[int]:
        """Builds registrados, ordenados de menor a mayor."""
        return sorted(set(self._protocols) | set(self._pending))

    def latest(self) -> DecoderSet | None:
        builds = self.builds()
        return self.resolve(builds[-1]) if builds else None

    def __contains__(self, build: Any) -> bool:
        try:
            build = int(build)
        except (TypeError, ValueError):
            return False
        return build in self._protocols or build in self._pending

    def __len__(self) -> int:
        return len(self.builds())

    def __iter__(self) -> Iterator[int]:
        return iter(self.builds())


def decoder_library_version(distribution: str = "heroprotocol") -> str | None:
    """Versión instalada de la librería de decoders, o None si no está instalada."""
    try:
        return importlib.metadata.version(distribution)
    except importlib.metadata.PackageNotFoundError:
        return None


_default_registry: ProtocolRegistry | None = None


def default_registry() -> ProtocolRegistry:
    """
    Registro compartido, descubierto en el paquete de protocolos configurado.

    Se construye la primera vez que se pide.
    """
    global _default_registry

    if _default_registry is None:
        registry = ProtocolRegistry()
        registry.discover(config.get_protocol_package())
        _default_registry = registry
    return _default_registry
