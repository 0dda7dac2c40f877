"""
Tests for data models and configuration loading.

Run with: pytest depot/reconcile/tests/test_models_config.py -v
"""

import json
import pytest
from decimal import Decimal

from depot.reconcile.config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_STOP_WORDS,
    MatchSettings,
    default_config,
    load_config,
)
from depot.reconcile.models import (
    InventoryState,
    MatchMethod,
    MatchOutcome,
    Product,
    TransitStatus,
)


class TestEnums:

    def test_transit_status_values(self):
        assert TransitStatus.IN_TRANSIT.value == "in_transit"
        assert TransitStatus.PARTIALLY_RECEIVED.value == "partially_received"
        assert TransitStatus.RECEIVED.value == "received"

    def test_match_outcome_created(self):
        product = Product(id="p1", name="Sleeves")
        assert MatchOutcome(product, MatchMethod.CREATED).created
        assert not MatchOutcome(product, MatchMethod.FUZZY, 0.7).created


class TestInventoryState:

    def test_lookups(self):
        state = InventoryState(products=[Product(id="p1", name="Sleeves")])
        assert state.get_product("p1").name == "Sleeves"
        assert state.get_product("p2") is None
        assert state.get_inventory("p1") is None
        assert state.get_supplier("s1") is None

    def test_product_lists_not_shared(self):
        a = Product(id="a", name="A")
        b = Product(id="b", name="B")
        a.aliases.append("x")
        assert b.aliases == []


class TestConfig:

    def test_shipped_file_matches_defaults(self):
        assert load_config(DEFAULT_CONFIG_PATH) == default_config()

    def test_defaults(self):
        settings = MatchSettings()
        assert settings.fuzzy_threshold == 0.5
        assert settings.min_token_length == 3
        assert settings.stop_words == DEFAULT_STOP_WORDS
        assert settings.cost_quantum == Decimal("0.0001")
        assert default_config().default_currency == "GBP"

    def test_partial_file_falls_back(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"settings": {"fuzzy_threshold": 0.7}}))

        config = load_config(path)
        assert config.settings.fuzzy_threshold == 0.7
        assert config.settings.stop_words == DEFAULT_STOP_WORDS
        assert config.settings.max_barcode_length == 128

    def test_custom_stop_words_lowercased(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"settings": {"stop_words": ["Pack", "SET"]}}))
        assert load_config(path).settings.stop_words == frozenset({"pack", "set"})

    def test_cost_places(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"settings": {"cost_places": 2}}))
        assert load_config(path).settings.cost_quantum == Decimal("0.01")

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_threshold_out_of_range(self, tmp_path, threshold):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"settings": {"fuzzy_threshold": threshold}}))
        with pytest.raises(ValueError, match="fuzzy_threshold"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")
