"""Catalog data model."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Dimension(models.TextChoices):
    """
    Independent axis of variation.

    Declaration order is the processing order used for defaults, repairs
    and tie-breaking.
    """

    COLOR = "color", _("Color")
    CAPACITY = "capacity", _("Capacidad")
    MEMORY = "memory", _("Memoria")


def discount_percent(price_q: int, list_price_q: int) -> int | None:
    """Whole-number discount of price over list price, None if there is none."""
    if list_price_q <= 0 or price_q <= 0 or price_q >= list_price_q:
        return None
    percent = Decimal((list_price_q - price_q) * 100) / Decimal(list_price_q)
    return int(percent.to_integral_value(rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Variant:
    """One concrete, purchasable unit of a base product.

    ``dimension_values`` omits dimensions the product does not vary on.
    Amounts are in the smallest currency unit.
    """

    base_product_id: str
    dimension_values: dict[Dimension, str] = field(default_factory=dict)
    sku: str = ""
    market_code: str = ""
    ean: str | None = None
    price_q: int = 0
    list_price_q: int = 0
    stock: int = 0
    media: tuple[str, ...] = ()

    @property
    def is_purchasable(self) -> bool:
        """True if the cart can reference this variant."""
        return bool(self.sku or self.market_code)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def discount_percent(self) -> int | None:
        return discount_percent(self.price_q, self.list_price_q)

    @property
    def combination(self) -> tuple[tuple[Dimension, str], ...]:
        """Present dimension values in declared order."""
        return tuple(
            (dimension, self.dimension_values[dimension])
            for dimension in Dimension
            if dimension in self.dimension_values
        )


@dataclass(frozen=True)
class BaseProduct:
    """The catalog entry a shopper browses to.

    Stands in as the only selectable unit when it has no variants.
    """

    product_id: str
    name: str = ""
    sku: str = ""
    market_code: str = ""
    ean: str | None = None
    price_q: int = 0
    list_price_q: int = 0
    stock: int = 0
    media: tuple[str, ...] = ()
    installments_enabled: bool = False

    def as_variant(self) -> Variant:
        """Degenerate one-variant form of the product."""
        return Variant(
            base_product_id=self.product_id,
            sku=self.sku,
            market_code=self.market_code,
            ean=self.ean,
            price_q=self.price_q,
            list_price_q=self.list_price_q,
            stock=self.stock,
            media=self.media,
        )


@dataclass(frozen=True)
class InstallmentPlan:
    """Zero-interest installment breakdown ready for display."""

    term_count: int
    per_installment_q: int
    total_price_q: int
    is_zero_interest: bool
    display_full: str
    display_short: str
