"""
Reparto de eventos en grupos según criterios campo -> valor.

Un criterio es un dict ``{campo: valor}``. Un evento entra en el grupo de
un criterio si *alguno* de sus campos está en el evento con ese valor
exacto (OR entre campos, no AND). El tipo también debe coincidir: ``True``
o ``1.0`` no valen para un criterio ``1``. Un mismo evento puede acabar en
varios grupos, pero como mucho una vez en cada uno.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Sequence

Criterion = Mapping[str, Any]


def _same_value(value: Any, expected: Any) -> bool:
    # True == 1 == 1.0 en Python; aquí el tipo también cuenta
    if isinstance(value, str) and isinstance(expected, str):
        return str(value) == str(expected)
    return type(value) is type(expected) and value == expected


def matches(event: dict[str, Any], criterion: Criterion) -> bool:
    """Indica si algún campo del criterio coincide con el evento."""
    for key, expected in criterion.items():
        if key in event and _same_value(event[key], expected):
            return True
    return False


def bucket_events(
    events: Iterable[Any],
    criteria: Sequence[Criterion],
    transform: Callable[[Any], Any] = lambda event: event,
) -> list[list[Any]]:
    """
    Reparte un flujo de eventos en un grupo por criterio.

    Args:
        events: Eventos en bruto (se consumen una sola vez).
        criteria: Lista ordenada de criterios.
        transform: Función aplicada a cada evento antes de compararlo
            (p. ej. la normalización); se llama una vez por evento.

    Returns:
        Lista con ``len(criteria)`` listas, en el mismo orden que los
        criterios y con los eventos en su orden original.
    """
    buckets: list[list[Any]] = [[] for _ in criteria]
    for raw_event in events:
        event = transform(raw_event)
        if not isinstance(event, dict):
            continue
        for bucket, criterion in zip(buckets, criteria):
            if matches(event, criterion):
                bucket.append(event)
    return buckets
