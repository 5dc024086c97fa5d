"""
Storefront API record adapter.

The product endpoint returns one record per base product with one array
per field, where index i of every array describes variant i:

    {
        "codigoMarket": "SM-S921",
        "nombreMarket": "Galaxy S24",
        "color": ["Negro", "Negro", "Violeta"],
        "capacidad": ["256GB", "512GB", "256GB"],
        "memoriaram": ["8GB", "8GB", "no aplica"],
        "sku": ["SM-S921BZKL", "SM-S921BZKX", "SM-S921BZVL"],
        "precioNormal": [4299900, 4799900, 4299900],
        "precioeccommerce": [3899900, 4399900, 3899900],
        "stock": [12, 0, 4],
        ...
    }

This module normalizes it once into BaseProduct and Variant so the
resolver never sees sentinel strings or corrupt prices.

Usage:
    product, variants = variants_from_record(record)
    catalog = catalog_from_record(record)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from varianter.catalog import VariantCatalog, build_catalog
from varianter.conf import varianter_settings
from varianter.protocols.catalog import BaseProduct, Dimension, Variant
from varianter.quality import report

logger = logging.getLogger(__name__)

# Record keys holding one entry per variant.
DIMENSION_KEYS = {
    Dimension.COLOR: ("nombreColor", "color"),
    Dimension.CAPACITY: ("capacidad",),
    Dimension.MEMORY: ("memoriaram",),
}
VARIANT_KEYS = (
    "color",
    "capacidad",
    "memoriaram",
    "sku",
    "ean",
    "codigoMarket",
    "precioNormal",
    "precioeccommerce",
    "precioDescto",
    "stock",
)


def _item(values, index: int):
    """Entry ``index`` of a per-variant array; scalars apply to every variant."""
    if isinstance(values, (list, tuple)):
        return values[index] if index < len(values) else None
    return values


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _amount(value) -> int:
    """Amount in the smallest unit; 0 when missing or unreadable."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return 0
    if not number.is_finite():
        return 0
    return int(number.to_integral_value(rounding=ROUND_HALF_UP))


def _variant_count(record: Mapping) -> int:
    lengths = [
        len(record[key])
        for key in VARIANT_KEYS
        if isinstance(record.get(key), (list, tuple))
    ]
    return max(lengths, default=0)


def _is_absent(value: str) -> bool:
    sentinels = {s.strip().lower() for s in varianter_settings.ABSENT_DIMENSION_VALUES}
    return value.lower() in sentinels


def _dimension_values(record: Mapping, index: int) -> dict[Dimension, str]:
    values = {}
    for dimension, keys in DIMENSION_KEYS.items():
        for key in keys:
            value = _text(_item(record.get(key), index))
            if value and not _is_absent(value):
                values[dimension] = value
                break
    return values


def _media(record: Mapping, index: int) -> tuple[str, ...]:
    urls: list[str] = []
    candidates = [
        _item(record.get("imagePreviewUrl"), index),
        _item(record.get("urlImagenes"), index),
    ]
    details = _item(record.get("imageDetailsUrls"), index)
    if isinstance(details, (list, tuple)):
        candidates.extend(details)

    for url in candidates:
        url = _text(url)
        if url and url not in urls:
            urls.append(url)
    return tuple(urls)


def _prices(record: Mapping, index: int, product_id: str) -> tuple[int, int]:
    """(price_q, list_price_q) with corrupt values replaced."""
    max_price = varianter_settings.MAX_VALID_PRICE_Q

    def valid(amount: int) -> bool:
        return 0 < amount < max_price

    list_price_q = _amount(_item(record.get("precioNormal"), index))
    sale = _item(record.get("precioeccommerce"), index)
    if sale is None:
        sale = _item(record.get("precioDescto"), index)
    price_q = _amount(sale)

    if not valid(list_price_q):
        if list_price_q:
            report("INVALID_PRICE", sender=__name__, product_id=product_id,
                   position=index, field="list_price", value=list_price_q)
        list_price_q = 0

    if not valid(price_q):
        report("INVALID_PRICE", sender=__name__, product_id=product_id,
               position=index, field="price", value=price_q)
        price_q = list_price_q

    return price_q, list_price_q or price_q


def _installments_enabled(record: Mapping) -> bool:
    flag = record.get("indcerointeres")
    if isinstance(flag, (list, tuple)):
        return any(_amount(value) == 1 for value in flag)
    return _amount(flag) == 1


def variants_from_record(record: Mapping) -> tuple[BaseProduct, list[Variant]]:
    """
    Normalize a parallel-array product record.

    Args:
        record: Deserialized product record from the storefront API

    Returns:
        (BaseProduct, variants in record order)
    """
    product_id = _text(_item(record.get("codigoMarket"), 0))
    count = _variant_count(record)

    variants = []
    for index in range(count):
        price_q, list_price_q = _prices(record, index, product_id)
        variants.append(
            Variant(
                base_product_id=product_id,
                dimension_values=_dimension_values(record, index),
                sku=_text(_item(record.get("sku"), index)),
                market_code=_text(_item(record.get("codigoMarket"), index)),
                ean=_text(_item(record.get("ean"), index)) or None,
                price_q=price_q,
                list_price_q=list_price_q,
                stock=max(0, _amount(_item(record.get("stock"), index))),
                media=_media(record, index),
            )
        )

    if variants:
        first = variants[0]
        product = BaseProduct(
            product_id=product_id,
            name=_text(record.get("nombreMarket") or record.get("modelo")),
            sku=first.sku,
            market_code=product_id,
            ean=first.ean,
            price_q=first.price_q,
            list_price_q=first.list_price_q,
            stock=sum(variant.stock for variant in variants),
            media=first.media,
            installments_enabled=_installments_enabled(record),
        )
    else:
        price_q, list_price_q = _prices(record, 0, product_id)
        product = BaseProduct(
            product_id=product_id,
            name=_text(record.get("nombreMarket") or record.get("modelo")),
            sku=_text(_item(record.get("sku"), 0)),
            market_code=product_id,
            ean=_text(_item(record.get("ean"), 0)) or None,
            price_q=price_q,
            list_price_q=list_price_q,
            stock=max(0, _amount(_item(record.get("stock"), 0))),
            media=_media(record, 0),
            installments_enabled=_installments_enabled(record),
        )

    logger.debug("Normalized record %s into %d variants", product_id, len(variants))
    return product, variants


def catalog_from_record(record: Mapping) -> VariantCatalog:
    """Normalize a record and index its variants."""
    product, variants = variants_from_record(record)
    return build_catalog(variants, product=product)
