"""Pytest fixtures for Varianter tests."""

import pytest

from varianter.catalog import build_catalog
from varianter.conf import reset_installment_backend
from varianter.protocols import BaseProduct, Dimension, Variant
from varianter.service import clear_installment_cache
from varianter.signals import data_quality_issue


def make_variant(sku, color=None, capacity=None, memory=None, **kwargs):
    """Variant of the test phone with the given dimension values."""
    values = {}
    if color is not None:
        values[Dimension.COLOR] = color
    if capacity is not None:
        values[Dimension.CAPACITY] = capacity
    if memory is not None:
        values[Dimension.MEMORY] = memory
    kwargs.setdefault("price_q", 1000000)
    kwargs.setdefault("list_price_q", 1200000)
    kwargs.setdefault("stock", 5)
    return Variant(base_product_id="GALAXY-A55", dimension_values=values, sku=sku, **kwargs)


@pytest.fixture
def phone():
    """Base product the variants belong to."""
    return BaseProduct(
        product_id="GALAXY-A55",
        name="Galaxy A55",
        sku="SM-A556",
        market_code="GALAXY-A55",
        price_q=500000,
        list_price_q=600000,
        stock=3,
        media=("https://cdn.example.com/a55/main.webp",),
        installments_enabled=True,
    )


@pytest.fixture
def full_grid(phone):
    """Color {Black, White} x Capacity {128GB, 256GB}, all present."""
    return build_catalog(
        [
            make_variant("A55-BK-128", "Black", "128GB", price_q=1000000),
            make_variant("A55-BK-256", "Black", "256GB", price_q=1200000),
            make_variant("A55-WH-128", "White", "128GB", price_q=1000000),
            make_variant("A55-WH-256", "White", "256GB", price_q=1200000),
        ],
        product=phone,
    )


@pytest.fixture
def sparse_grid(phone):
    """Only Black+256GB and White+128GB exist."""
    return build_catalog(
        [
            make_variant("A55-BK-256", "Black", "256GB"),
            make_variant("A55-WH-128", "White", "128GB"),
        ],
        product=phone,
    )


@pytest.fixture
def three_dimensions(phone):
    """Color x Capacity x Memory with gaps."""
    return build_catalog(
        [
            make_variant("BK-128-8", "Black", "128GB", "8GB"),
            make_variant("BK-256-8", "Black", "256GB", "8GB"),
            make_variant("BK-256-12", "Black", "256GB", "12GB"),
            make_variant("WH-128-8", "White", "128GB", "8GB"),
            make_variant("WH-512-12", "White", "512GB", "12GB"),
            make_variant("GR-512-12", "Gray", "512GB", "12GB"),
        ],
        product=phone,
    )


@pytest.fixture
def empty_catalog(phone):
    return build_catalog([], product=phone)


@pytest.fixture
def issues():
    """Collect data_quality_issue reports as (code, data) tuples."""
    received = []

    def receiver(sender, code, message, data, **kwargs):
        received.append((code, data))

    data_quality_issue.connect(receiver, weak=False)
    yield received
    data_quality_issue.disconnect(receiver)


@pytest.fixture(autouse=True)
def _reset_backend():
    reset_installment_backend()
    yield
    reset_installment_backend()


@pytest.fixture(autouse=True)
def _clear_installment_cache():
    clear_installment_cache()
    yield
