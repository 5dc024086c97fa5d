"""
Varianter public API.

CORE (essential):
    VariantService.build(variants)            - Index a product's variants
    VariantService.initialize(catalog, sku)   - Open a selection
    VariantService.select(state, dim, value)  - Shopper picks a value
    VariantService.available(state, dim)      - Values still selectable
    VariantService.installment_plan(state)    - Zero-interest plan

CONVENIENCE (helpers):
    VariantService.from_record(record)        - Catalog from an API record
    VariantService.options(state)             - Selector data for every dimension
    VariantService.reset(state)               - Back to the default selection
    VariantService.summary(state)             - Payload for cart and gallery
"""

import hashlib
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from django.core.cache import cache

from varianter import resolver
from varianter.catalog import VariantCatalog, build_catalog
from varianter.conf import get_installment_backend, varianter_settings
from varianter.formatting import format_discount, format_price_or_placeholder
from varianter.installments import compute_zero_interest_plan

if TYPE_CHECKING:
    from varianter.protocols import BaseProduct, InstallmentPlan, Variant
    from varianter.resolver import SelectionState

logger = logging.getLogger(__name__)

INSTALLMENT_CACHE_PREFIX = "varianter:installments"
_GENERATION_KEY = f"{INSTALLMENT_CACHE_PREFIX}:generation"


def _price_table_key(product_id: str, prices: list[int]) -> str:
    generation = cache.get(_GENERATION_KEY, 0)
    digest = hashlib.sha1(f"{product_id}|{','.join(map(str, prices))}".encode()).hexdigest()
    return f"{INSTALLMENT_CACHE_PREFIX}:{generation}:{digest}"


def clear_installment_cache():
    """
    Forget every cached installment price table.

    Bumps a generation counter instead of clearing the whole cache, which
    may be shared with the rest of the project.
    """
    try:
        cache.incr(_GENERATION_KEY)
    except ValueError:
        cache.set(_GENERATION_KEY, 1, None)


class VariantService:
    """
    Varianter public API.

    Uses @classmethod for extensibility: subclass and override a single
    step (e.g. _fetch_price_table for another price source) without
    touching the rest.
    """

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def build(
        cls,
        variants: Iterable["Variant"],
        product: "BaseProduct | None" = None,
    ) -> VariantCatalog:
        """Index a base product's variants. See varianter.catalog.build_catalog."""
        return build_catalog(variants, product=product)

    @classmethod
    def initialize(
        cls,
        catalog: VariantCatalog,
        preferred_sku: str | None = None,
    ) -> "SelectionState":
        """
        Open a selection.

        Args:
            catalog: Index built by build() or from_record()
            preferred_sku: SKU or market code to start on (e.g. from the URL)

        Returns:
            SelectionState resolved to one variant (or the base product)
        """
        return resolver.initialize(catalog, preferred_sku)

    @classmethod
    def select(cls, state: "SelectionState", dimension, value: str) -> "SelectionState":
        """
        Apply a shopper click.

        Raises:
            VariantError: If dimension is not a Dimension (caller bug)
        """
        return resolver.select_dimension(state, dimension, value)

    @classmethod
    def available(cls, state: "SelectionState", dimension) -> tuple[str, ...]:
        """Values of dimension compatible with the other pinned values."""
        return resolver.available_values(state, dimension)

    @classmethod
    def installment_plan(
        cls,
        state: "SelectionState",
        price_by_term_count: Mapping | None = None,
        enabled: bool | None = None,
    ) -> "InstallmentPlan | None":
        """
        Zero-interest plan for the resolved variant's price.

        Args:
            state: Current selection
            price_by_term_count: {term_count: price_q}; read from the
                configured InstallmentBackend when omitted
            enabled: Feature flag; defaults to the product's flag and
                VARIANTER["INSTALLMENTS_ENABLED"]

        Returns:
            InstallmentPlan | None (display the plain price)
        """
        variant = state.resolved
        if variant is None:
            return None

        if enabled is None:
            product = state.catalog.product
            enabled = bool(
                varianter_settings.INSTALLMENTS_ENABLED
                and product is not None
                and product.installments_enabled
            )
        if not enabled:
            return None

        if price_by_term_count is None:
            price_by_term_count = cls._fetch_price_table(state)

        return compute_zero_interest_plan(price_by_term_count, variant.price_q, enabled)

    @classmethod
    def _fetch_price_table(cls, state: "SelectionState") -> dict[int, int]:
        """
        Internal: ask the InstallmentBackend, through the Django cache.

        Tables are cached per product and price list for
        VARIANTER["INSTALLMENT_CACHE_TIMEOUT"] seconds (0 disables caching).
        Backend failures are not cached.
        """
        catalog = state.catalog
        product_id = catalog.product.product_id if catalog.product else state.resolved.base_product_id
        prices = sorted({variant.price_q for variant in catalog.variants} or {state.resolved.price_q})

        timeout = varianter_settings.INSTALLMENT_CACHE_TIMEOUT
        key = _price_table_key(product_id, prices)
        if timeout:
            table = cache.get(key)
            if table is not None:
                return table

        try:
            table = get_installment_backend().get_prices(product_id, prices)
        except Exception:
            # A missing plan must never block the price display.
            logger.exception("InstallmentBackend failed for %s", product_id)
            return {}

        if timeout:
            cache.set(key, table, timeout)
        return table

    # ======================================================================
    # CONVENIENCE API
    # ======================================================================

    @classmethod
    def from_record(cls, record: Mapping) -> VariantCatalog:
        """Catalog from a storefront API product record."""
        from varianter.adapters.api_record import catalog_from_record

        return catalog_from_record(record)

    @classmethod
    def options(cls, state: "SelectionState") -> dict[str, dict]:
        """Selector data for every dimension. See resolver.available_options."""
        return resolver.available_options(state)

    @classmethod
    def reset(cls, state: "SelectionState") -> "SelectionState":
        return resolver.reset(state)

    @classmethod
    def summary(cls, state: "SelectionState") -> dict | None:
        """
        Outbound payload for the add-to-cart and media-gallery collaborators.

        Media falls back to the base product's media when the variant has
        none.

        Returns:
            {"sku", "market_code", "ean", "price_q", "list_price_q",
             "discount_percent", "discount", "price_display", "stock",
             "in_stock", "is_purchasable", "dimensions", "media"}
            or None when nothing is resolved.
        """
        variant = state.resolved
        if variant is None:
            return None

        product = state.catalog.product
        media = variant.media or (product.media if product else ())

        return {
            "sku": variant.sku or None,
            "market_code": variant.market_code or None,
            "ean": variant.ean,
            "price_q": variant.price_q,
            "list_price_q": variant.list_price_q,
            "discount_percent": variant.discount_percent,
            "discount": format_discount(variant.price_q, variant.list_price_q),
            "price_display": format_price_or_placeholder(variant.price_q),
            "stock": variant.stock,
            "in_stock": variant.in_stock,
            "is_purchasable": variant.is_purchasable,
            "dimensions": {dimension.value: value for dimension, value in variant.combination},
            "media": list(media),
        }
