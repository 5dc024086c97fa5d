"""
Variant catalog index.

A VariantCatalog is built once per fetched snapshot of a base product's
variants and never patched afterwards: a refresh builds a new one.

Usage:
    catalog = build_catalog(variants, product=base_product)
    catalog.values_for(Dimension.COLOR)      # ("Negro", "Blanco")
    catalog.matching({Dimension.COLOR: "Negro"})  # positions in raw order
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from varianter.protocols.catalog import BaseProduct, Dimension, Variant
from varianter.quality import report

logger = logging.getLogger(__name__)

Pins = Mapping[Dimension, str]


@dataclass(frozen=True)
class VariantCatalog:
    """Immutable lookup structures over one base product's variants.

    Variants are referred to by their position in the raw input, which is
    also the tie-breaking order everywhere in the engine.
    """

    variants: tuple[Variant, ...] = ()
    variants_by_dimension_value: dict[tuple[Dimension, str], tuple[int, ...]] = field(
        default_factory=dict
    )
    all_dimension_values_present: dict[Dimension, tuple[str, ...]] = field(
        default_factory=dict
    )
    duplicates: frozenset = frozenset()
    product: BaseProduct | None = None

    @property
    def is_empty(self) -> bool:
        return not self.variants

    @property
    def dimensions(self) -> tuple[Dimension, ...]:
        """Dimensions this product varies on, in declared order."""
        return tuple(d for d in Dimension if d in self.all_dimension_values_present)

    def values_for(self, dimension: Dimension) -> tuple[str, ...]:
        return self.all_dimension_values_present.get(dimension, ())

    def matching(self, pins: Pins) -> tuple[int, ...]:
        """Positions of variants carrying every pinned value."""
        positions: set[int] | None = None
        for dimension, value in pins.items():
            bucket = set(self.variants_by_dimension_value.get((dimension, value), ()))
            positions = bucket if positions is None else positions & bucket
            if not positions:
                return ()
        if positions is None:
            return tuple(range(len(self.variants)))
        return tuple(sorted(positions))

    def is_reachable(self, pins: Pins) -> bool:
        return bool(self.matching(pins))

    def exact(self, pins: Pins) -> tuple[int, ...]:
        """Positions of variants whose full combination equals ``pins``."""
        wanted = dict(pins)
        return tuple(
            position
            for position in self.matching(pins)
            if dict(self.variants[position].combination) == wanted
        )

    def find(self, sku: str | None) -> int | None:
        """Position of the first variant with this SKU or market code."""
        if not sku:
            return None
        for position, variant in enumerate(self.variants):
            if sku in (variant.sku, variant.market_code):
                return position
        return None


def build_catalog(
    raw_variants: Iterable[Variant],
    product: BaseProduct | None = None,
) -> VariantCatalog:
    """
    Index a base product's variants.

    Never raises on bad data. Variants without identifiers, repeated
    combinations and empty catalogs are reported and indexed as-is.

    Args:
        raw_variants: Variants in catalog order (most to least popular)
        product: The base product, used when there are no variants

    Returns:
        VariantCatalog
    """
    variants = tuple(raw_variants)
    buckets: dict[tuple[Dimension, str], list[int]] = {}
    values: dict[Dimension, list[str]] = {}
    first_seen: dict[tuple, int] = {}
    duplicates: set[tuple] = set()

    for position, variant in enumerate(variants):
        combination = variant.combination

        if not variant.is_purchasable:
            report(
                "MISSING_IDENTIFIERS",
                sender=__name__,
                product_id=variant.base_product_id,
                position=position,
                combination=combination,
            )

        for dimension, value in combination:
            buckets.setdefault((dimension, value), []).append(position)
            seen_values = values.setdefault(dimension, [])
            if value not in seen_values:
                seen_values.append(value)

        if combination in first_seen:
            if combination not in duplicates:
                duplicates.add(combination)
                report(
                    "DUPLICATE_COMBINATION",
                    sender=__name__,
                    product_id=variant.base_product_id,
                    combination=combination,
                    kept_position=first_seen[combination],
                )
        else:
            first_seen[combination] = position

    if not variants:
        report(
            "EMPTY_CATALOG",
            sender=__name__,
            product_id=product.product_id if product else None,
        )

    logger.debug(
        "Built catalog: %d variants, dimensions=%s",
        len(variants),
        {dimension.value: len(vals) for dimension, vals in values.items()},
    )

    return VariantCatalog(
        variants=variants,
        variants_by_dimension_value={key: tuple(val) for key, val in buckets.items()},
        all_dimension_values_present={key: tuple(val) for key, val in values.items()},
        duplicates=frozenset(duplicates),
        product=product,
    )
