"""
Selection resolver.

Keeps a shopper's selection resolved to exactly one variant. The dimension
the shopper just touched is authoritative; the others are repaired around
it, in declared order, falling back to the first reachable value.

Usage:
    state = initialize(catalog)
    state = select_dimension(state, Dimension.CAPACITY, "256GB")
    state.resolved.sku
    available_values(state, Dimension.COLOR)
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from varianter.catalog import Pins, VariantCatalog
from varianter.exceptions import VariantError
from varianter.protocols.catalog import Dimension, Variant
from varianter.quality import report
from varianter.swatches import swatch_hex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    """Pinned values plus the variant they resolve to.

    States compare by ``pinned`` and ``resolved`` only.
    """

    pinned: dict[Dimension, str] = field(default_factory=dict)
    resolved: Variant | None = None
    catalog: VariantCatalog = field(default_factory=VariantCatalog, compare=False, repr=False)


def _as_dimension(dimension) -> Dimension:
    try:
        return Dimension(dimension)
    except ValueError:
        raise VariantError(
            "UNKNOWN_DIMENSION",
            dimension=dimension,
            allowed=[choice.value for choice in Dimension],
        ) from None


def _first_reachable(catalog: VariantCatalog, confirmed: Pins, dimension: Dimension) -> str | None:
    return next(
        (
            value
            for value in catalog.values_for(dimension)
            if catalog.is_reachable({**confirmed, dimension: value})
        ),
        None,
    )


def _repair(catalog: VariantCatalog, pins: Pins, order: Iterable[Dimension]) -> dict[Dimension, str]:
    """
    Confirm pins one dimension at a time.

    Pinned dimensions go first: a pin survives if it is reachable together
    with the pins confirmed before it; otherwise it becomes the first
    reachable value of its dimension. Unpinned dimensions are filled
    afterwards, only with a value reachable under every confirmed pin, so
    filling one never displaces an existing pin. A dimension with no
    reachable value is left unpinned.
    """
    order = tuple(order)
    confirmed: dict[Dimension, str] = {}

    for dimension in order:
        current = pins.get(dimension)
        if current is None:
            continue
        if catalog.is_reachable({**confirmed, dimension: current}):
            confirmed[dimension] = current
            continue

        replacement = _first_reachable(catalog, confirmed, dimension)
        if replacement is not None:
            logger.debug("Repaired %s: %r -> %r", dimension.value, current, replacement)
            confirmed[dimension] = replacement

    for dimension in order:
        if dimension in confirmed:
            continue
        value = _first_reachable(catalog, confirmed, dimension)
        if value is not None:
            confirmed[dimension] = value

    return {dimension: confirmed[dimension] for dimension in Dimension if dimension in confirmed}


def _resolve(catalog: VariantCatalog, pinned: Pins) -> Variant | None:
    if catalog.is_empty:
        return catalog.product.as_variant() if catalog.product else None

    exact = catalog.exact(pinned)
    if exact:
        for position in exact:
            if catalog.variants[position].is_purchasable:
                return catalog.variants[position]
        return catalog.variants[exact[0]]

    # Unreachable after _repair unless the catalog is inconsistent.
    report(
        "NO_RESOLUTION",
        sender=__name__,
        product_id=catalog.variants[0].base_product_id,
        pinned=dict(pinned),
    )

    def shared(position: int) -> int:
        values = catalog.variants[position].dimension_values
        return sum(1 for dimension, value in pinned.items() if values.get(dimension) == value)

    best = max(range(len(catalog.variants)), key=lambda position: (shared(position), -position))
    return catalog.variants[best]


def initialize(catalog: VariantCatalog, preferred_sku: str | None = None) -> SelectionState:
    """
    Open a selection on ``catalog``.

    Pins the preferred variant's values when its SKU (or market code) is
    found; otherwise the first reachable value of each dimension.
    """
    pinned: dict[Dimension, str] | None = None

    if preferred_sku:
        position = catalog.find(preferred_sku)
        if position is None:
            report(
                "SKU_NOT_FOUND",
                sender=__name__,
                sku=preferred_sku,
                product_id=catalog.product.product_id if catalog.product else None,
            )
        else:
            pinned = dict(catalog.variants[position].combination)

    if pinned is None:
        pinned = _repair(catalog, {}, catalog.dimensions)

    return SelectionState(pinned=pinned, resolved=_resolve(catalog, pinned), catalog=catalog)


def select_dimension(state: SelectionState, dimension, value: str) -> SelectionState:
    """
    Pin ``dimension`` to ``value`` and repair the other dimensions.

    Values the catalog does not offer are reported and ignored.

    Raises:
        VariantError: If ``dimension`` is not a Dimension
    """
    dimension = _as_dimension(dimension)
    catalog = state.catalog

    if state.pinned.get(dimension) == value:
        return state

    if value not in catalog.values_for(dimension):
        report(
            "UNAVAILABLE_VALUE",
            sender=__name__,
            dimension=dimension.value,
            value=value,
            product_id=catalog.product.product_id if catalog.product else None,
        )
        return state

    pins = {**state.pinned, dimension: value}
    order = (dimension, *(d for d in catalog.dimensions if d != dimension))
    pinned = _repair(catalog, pins, order)

    return SelectionState(pinned=pinned, resolved=_resolve(catalog, pinned), catalog=catalog)


def available_values(state: SelectionState, dimension) -> tuple[str, ...]:
    """
    Values of ``dimension`` reachable under the other pinned dimensions.

    Recomputed from the index on every call, in catalog order.
    """
    dimension = _as_dimension(dimension)
    catalog = state.catalog
    others = {d: v for d, v in state.pinned.items() if d != dimension}

    reachable = {
        catalog.variants[position].dimension_values.get(dimension)
        for position in catalog.matching(others)
    }
    return tuple(value for value in catalog.values_for(dimension) if value in reachable)


def available_options(state: SelectionState) -> dict[str, dict]:
    """
    Selector data for every dimension the product varies on.

    Every catalog value is listed; values incompatible with the other pins
    carry ``is_available=False`` so the UI can grey them out.
    """
    result = {}

    for dimension in state.catalog.dimensions:
        available = set(available_values(state, dimension))
        current = state.pinned.get(dimension)

        result[dimension.value] = {
            "name": str(dimension.label),
            "slug": dimension.value,
            "options": [
                {
                    "value": value,
                    "label": value,
                    "hex": swatch_hex(value) if dimension == Dimension.COLOR else None,
                    "is_selected": value == current,
                    "is_available": value in available,
                }
                for value in state.catalog.values_for(dimension)
            ],
        }

    return result


def reset(state: SelectionState) -> SelectionState:
    """Back to the default selection on the same catalog."""
    return initialize(state.catalog)
