"""
Excepciones propias del analizador de replays.

Hay dos niveles de error:

- Apertura/resolución (archivo inválido, protocolo desconocido): se devuelven
  como valor (una instancia de ``InvalidReplayError``) o quedan anotados en
  ``Archive.error``; nunca se lanzan hacia el llamador.
- Decodificación (sección ausente, decoder que falla): se propagan.
"""


class ReplayAnalyzerError(Exception):
    """Error base del analizador de replays."""

    pass


class InvalidReplayError(ReplayAnalyzerError):
    """El archivo no es un replay válido o no se puede abrir."""

    pass


class CorruptReplayError(ReplayAnalyzerError):
    """El replay está corrupto o no se puede decodificar correctamente."""

    pass


class MissingDataError(ReplayAnalyzerError):
    """Falta una sección esperada dentro del contenedor del replay."""

    pass


class ProtocolNotFoundError(ReplayAnalyzerError):
    """No hay decoders registrados para la versión (build) pedida."""

    def __init__(self, build):
        super().__init__(f"protocol {build} not found")
        self.build = build


class UnsupportedSectionError(ReplayAnalyzerError):
    """La sección pedida no existe o el protocolo no sabe decodificarla."""

    pass
