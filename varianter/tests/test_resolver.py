"""Tests for the selection resolver."""

import random

import pytest

from varianter.catalog import build_catalog
from varianter.exceptions import VariantError
from varianter.protocols import Dimension
from varianter.resolver import (
    available_options,
    available_values,
    initialize,
    reset,
    select_dimension,
)
from varianter.tests.conftest import make_variant


class TestInitialize:
    """Tests for initialize()."""

    def test_defaults_to_first_values(self, full_grid):
        """Scenario A: starts on {Black, 128GB}."""
        state = initialize(full_grid)
        assert state.pinned == {Dimension.COLOR: "Black", Dimension.CAPACITY: "128GB"}
        assert state.resolved.sku == "A55-BK-128"

    def test_preferred_sku(self, full_grid):
        state = initialize(full_grid, preferred_sku="A55-WH-256")
        assert state.pinned == {Dimension.COLOR: "White", Dimension.CAPACITY: "256GB"}
        assert state.resolved.sku == "A55-WH-256"

    def test_unknown_preferred_sku_falls_back(self, full_grid, issues):
        state = initialize(full_grid, preferred_sku="NOPE")
        assert state.resolved.sku == "A55-BK-128"
        assert [code for code, _ in issues] == ["SKU_NOT_FOUND"]

    def test_unreachable_dimension_left_unpinned(self):
        """Memory has no value compatible with Black/128GB."""
        catalog = build_catalog(
            [
                make_variant("BK-128", "Black", "128GB"),
                make_variant("WH-256-8", "White", "256GB", "8GB"),
            ]
        )
        state = initialize(catalog)
        assert state.pinned == {Dimension.COLOR: "Black", Dimension.CAPACITY: "128GB"}
        assert state.resolved.sku == "BK-128"
        assert available_values(state, Dimension.MEMORY) == ()

    def test_empty_catalog_synthesizes_base_product(self, empty_catalog, phone):
        """Scenario E: the base product is the single selectable unit."""
        state = initialize(empty_catalog)

        assert state.pinned == {}
        assert state.resolved.sku == phone.sku
        assert state.resolved.price_q == 500000
        assert state.resolved.media == phone.media
        for dimension in Dimension:
            assert available_values(state, dimension) == ()

    def test_empty_catalog_without_product(self):
        state = initialize(build_catalog([]))
        assert state.resolved is None


class TestSelectDimension:
    """Tests for select_dimension()."""

    def test_change_capacity(self, full_grid):
        """Scenario A: Capacity -> 256GB keeps Black."""
        state = select_dimension(initialize(full_grid), Dimension.CAPACITY, "256GB")
        assert state.pinned == {Dimension.COLOR: "Black", Dimension.CAPACITY: "256GB"}
        assert state.resolved.sku == "A55-BK-256"

    def test_repairs_unreachable_dimension(self, sparse_grid):
        """Scenario B: {White, 128GB} + 256GB repairs Color to Black."""
        state = initialize(sparse_grid, preferred_sku="A55-WH-128")
        state = select_dimension(state, Dimension.CAPACITY, "256GB")

        assert state.pinned == {Dimension.COLOR: "Black", Dimension.CAPACITY: "256GB"}
        assert state.resolved.sku == "A55-BK-256"

    def test_string_dimension(self, full_grid):
        state = select_dimension(initialize(full_grid), "capacity", "256GB")
        assert state.resolved.sku == "A55-BK-256"

    def test_unknown_value_is_noop(self, full_grid, issues):
        state = initialize(full_grid)
        assert select_dimension(state, Dimension.COLOR, "Purple") is state
        assert [code for code, _ in issues] == ["UNAVAILABLE_VALUE"]

    def test_dimension_product_does_not_have(self, full_grid):
        state = initialize(full_grid)
        assert select_dimension(state, Dimension.MEMORY, "8GB") is state

    def test_unknown_dimension_raises(self, full_grid):
        with pytest.raises(VariantError) as exc:
            select_dimension(initialize(full_grid), "size", "XL")
        assert exc.value.code == "UNKNOWN_DIMENSION"
        assert exc.value.dimension == "size"
        assert exc.value.data["allowed"] == ["color", "capacity", "memory"]

    def test_idempotent(self, three_dimensions):
        state = initialize(three_dimensions)
        for dimension, value in state.pinned.items():
            assert select_dimension(state, dimension, value) == state

    def test_unrelated_dimension_kept(self, three_dimensions):
        """Black/256GB/12GB -> 8GB keeps Black and 256GB."""
        state = initialize(three_dimensions, preferred_sku="BK-256-12")
        state = select_dimension(state, Dimension.MEMORY, "8GB")
        assert state.pinned == {
            Dimension.COLOR: "Black",
            Dimension.CAPACITY: "256GB",
            Dimension.MEMORY: "8GB",
        }

    def test_repairs_in_declared_order(self, three_dimensions):
        """Gray forces 512GB, then 12GB."""
        state = initialize(three_dimensions)
        state = select_dimension(state, Dimension.COLOR, "Gray")
        assert state.resolved.sku == "GR-512-12"

    def test_prefers_purchasable_duplicate(self):
        catalog = build_catalog(
            [
                make_variant("", "Black", "128GB"),
                make_variant("BK-128", "Black", "128GB"),
            ]
        )
        state = initialize(catalog)
        assert state.resolved.sku == "BK-128"

    def test_duplicate_resolves_to_first_occurrence(self):
        catalog = build_catalog(
            [
                make_variant("FIRST", "Black", "128GB", price_q=1100000),
                make_variant("SECOND", "Black", "128GB", price_q=900000),
            ]
        )
        assert initialize(catalog).resolved.sku == "FIRST"

    def test_variant_without_optional_dimension(self):
        """A variant lacking memory is still reachable."""
        catalog = build_catalog(
            [
                make_variant("BK-8", "Black", memory="8GB"),
                make_variant("WH", "White"),
            ]
        )
        state = select_dimension(initialize(catalog), Dimension.COLOR, "White")
        assert state.pinned == {Dimension.COLOR: "White"}
        assert state.resolved.sku == "WH"

        state = select_dimension(state, Dimension.COLOR, "Black")
        assert state.pinned == {Dimension.COLOR: "Black", Dimension.MEMORY: "8GB"}
        assert state.resolved.sku == "BK-8"

    def test_converges_for_random_clicks(self, three_dimensions):
        """Every click sequence ends on an exact, existing combination."""
        rng = random.Random(20241019)
        state = initialize(three_dimensions)

        for _ in range(200):
            dimension = rng.choice(three_dimensions.dimensions)
            value = rng.choice(three_dimensions.values_for(dimension))
            previous = state
            state = select_dimension(state, dimension, value)

            assert state.resolved is not None
            assert state.pinned[dimension] == value
            assert dict(state.resolved.combination) == state.pinned

            requested = {**previous.pinned, dimension: value}
            if three_dimensions.is_reachable(requested):
                assert state.pinned == requested


class TestMixedAxes:
    """select_dimension() on catalogs where some variants lack an axis."""

    @pytest.fixture
    def mixed(self):
        return build_catalog(
            [
                make_variant("BK-8", "Black", memory="8GB"),
                make_variant("BK-128", "Black", "128GB"),
                make_variant("WH-128-8", "White", "128GB", "8GB"),
                make_variant("WH-256", "White", "256GB"),
                make_variant("GR", "Gray"),
            ]
        )

    def test_reselecting_pinned_value_keeps_selection(self):
        catalog = build_catalog(
            [
                make_variant("BK-8", "Black", memory="8GB"),
                make_variant("BK-128", "Black", "128GB"),
            ]
        )
        state = select_dimension(initialize(catalog), Dimension.MEMORY, "8GB")
        assert state.resolved.sku == "BK-8"
        assert state.pinned == {Dimension.COLOR: "Black", Dimension.MEMORY: "8GB"}

        assert select_dimension(state, Dimension.COLOR, "Black") == state

    def test_reselecting_returns_same_state(self, mixed):
        state = initialize(mixed)
        for dimension, value in state.pinned.items():
            assert select_dimension(state, dimension, value) is state

    def test_filling_never_displaces_a_pin(self, mixed):
        """Switching to White keeps memory 8GB and fills capacity around it."""
        state = select_dimension(initialize(mixed), Dimension.MEMORY, "8GB")
        assert state.resolved.sku == "BK-8"

        state = select_dimension(state, Dimension.COLOR, "White")
        assert state.pinned == {
            Dimension.COLOR: "White",
            Dimension.CAPACITY: "128GB",
            Dimension.MEMORY: "8GB",
        }
        assert state.resolved.sku == "WH-128-8"

    def test_converges_for_random_clicks(self, mixed):
        rng = random.Random(20261019)
        state = initialize(mixed)

        for _ in range(300):
            dimension = rng.choice(mixed.dimensions)
            value = rng.choice(mixed.values_for(dimension))
            previous = state
            state = select_dimension(state, dimension, value)

            assert state.resolved is not None
            assert state.pinned[dimension] == value
            assert dict(state.resolved.combination) == state.pinned
            assert select_dimension(state, dimension, value) == state
            for pinned_dimension, pinned_value in state.pinned.items():
                assert select_dimension(state, pinned_dimension, pinned_value) == state

            requested = {**previous.pinned, dimension: value}
            if mixed.is_reachable(requested):
                assert requested.items() <= state.pinned.items()


class TestAvailableValues:
    """Tests for available_values()."""

    def test_full_grid_everything_available(self, full_grid):
        state = initialize(full_grid)
        assert available_values(state, Dimension.COLOR) == ("Black", "White")
        assert available_values(state, Dimension.CAPACITY) == ("128GB", "256GB")

    def test_sparse_grid_greys_out(self, sparse_grid):
        state = initialize(sparse_grid)
        assert state.pinned == {Dimension.COLOR: "Black", Dimension.CAPACITY: "256GB"}
        assert available_values(state, Dimension.CAPACITY) == ("256GB",)
        assert available_values(state, Dimension.COLOR) == ("Black",)

    def test_ignores_own_pin(self, three_dimensions):
        state = initialize(three_dimensions, preferred_sku="WH-512-12")
        assert available_values(state, Dimension.COLOR) == ("White", "Gray")
        assert available_values(state, Dimension.MEMORY) == ("12GB",)

    def test_current_value_always_available(self, three_dimensions):
        state = initialize(three_dimensions)
        for dimension in three_dimensions.dimensions:
            assert state.pinned[dimension] in available_values(state, dimension)


class TestAvailableOptions:
    """Tests for available_options() and reset()."""

    def test_options_payload(self, sparse_grid):
        state = initialize(sparse_grid)
        options = available_options(state)

        assert list(options) == ["color", "capacity"]
        colors = options["color"]["options"]
        assert colors[0] == {
            "value": "Black",
            "label": "Black",
            "hex": "#808080",
            "is_selected": True,
            "is_available": True,
        }
        assert colors[1]["is_available"] is False
        assert options["capacity"]["options"][0]["hex"] is None

    def test_reset(self, full_grid):
        state = select_dimension(initialize(full_grid), Dimension.COLOR, "White")
        assert reset(state) == initialize(full_grid)
