"""Tests for jmc/core/model.py: immutable edits and JSON payload conversion."""
import pytest

from jmc.core.model import (
    CAR_BRANDS, Category, ClientMetadata, PricedItem, SimpleItem,
    add_item, categories_from_payload, categories_to_payload,
    client_from_payload, client_to_payload, default_categories,
    remove_item, replace_field, update_item,
)


class TestDefaults:

    def test_three_categories_in_order(self):
        cats = default_categories()
        assert [c.key for c in cats] == ["repuestos", "mano_obra", "insumos"]
        assert all(len(c.items) == 1 for c in cats)

    def test_only_labor_is_labor(self):
        assert [c.is_labor for c in default_categories()] == [False, True, False]

    def test_brands_sorted(self):
        assert CAR_BRANDS == sorted(CAR_BRANDS)
        assert "Toyota" in CAR_BRANDS


class TestEdits:

    def test_add_item(self):
        cats = add_item(default_categories(), "repuestos")
        assert len(cats[0].items) == 2
        assert cats[0].items[1] == PricedItem()

    def test_remove_only_item_leaves_blank(self):
        cats = update_item(default_categories(), "insumos", 0, "description", "Grasa")
        cats = remove_item(cats, "insumos", 0)
        assert cats[2].items == (PricedItem(),)

    def test_remove_keeps_others(self):
        cats = add_item(default_categories(), "repuestos")
        cats = update_item(cats, "repuestos", 1, "description", "Bujía")
        cats = remove_item(cats, "repuestos", 0)
        assert [i.description for i in cats[0].items] == ["Bujía"]

    def test_blank_row_matches_simple_category(self):
        cats = [Category("repuestos", "Repuestos", (SimpleItem("Aceite", "10.000"),))]
        cats = remove_item(cats, "repuestos", 0)
        assert cats[0].items == (SimpleItem(),)
        assert add_item(cats, "repuestos")[0].items[-1] == SimpleItem()

    def test_update_does_not_mutate_input(self):
        before = default_categories()
        after = update_item(before, "mano_obra", 0, "unit_price", "25.000")
        assert before[1].items[0].unit_price == ""
        assert after[1].items[0].unit_price == "25.000"

    def test_update_unknown_field(self):
        with pytest.raises(KeyError):
            update_item(default_categories(), "mano_obra", 0, "amount", "1")

    def test_unknown_category_untouched(self):
        cats = default_categories()
        assert add_item(cats, "pintura") == cats

    def test_replace_field(self):
        meta = replace_field(ClientMetadata(), "plate", "ABCD12")
        assert meta.plate == "ABCD12"
        with pytest.raises(KeyError):
            replace_field(meta, "color", "rojo")


class TestPayloads:

    def test_camel_and_snake_client(self):
        meta = client_from_payload({"clientName": "Ana", "vehicle_year": 2018})
        assert meta.client_name == "Ana"
        assert meta.vehicle_year == "2018"
        assert meta.plate == ""

    def test_client_round_trip_keys(self):
        assert "vehicleMileage" in client_to_payload(ClientMetadata())

    def test_items_by_shape(self):
        cats = categories_from_payload([{"key": "repuestos", "items": [
            {"description": "A", "amount": "1.000"},
            {"description": "B", "unitPrice": "2.000", "quantity": "3"},
        ]}])
        assert cats[0].items == (SimpleItem("A", "1.000"), PricedItem("B", "2.000", "3"))
        assert cats[0].label == "repuestos"

    def test_empty_items_get_blank_row(self):
        cats = categories_from_payload([{"key": "insumos", "label": "Insumos", "items": []}])
        assert cats[0].items == (PricedItem(),)

    def test_missing_categories_default(self):
        assert categories_from_payload(None) == default_categories()

    @pytest.mark.parametrize("bad", ["x", [{"label": "no key"}], [{"key": "a", "items": "x"}], [1]])
    def test_invalid(self, bad):
        with pytest.raises(ValueError):
            categories_from_payload(bad)

    def test_duplicate_key_rejected(self):
        with pytest.raises(ValueError, match="duplicate"):
            categories_from_payload([
                {"key": "repuestos", "items": [{"description": "A", "amount": "10.000"}]},
                {"key": "repuestos", "items": [{"description": "B", "amount": "5.000"}]},
            ])

    def test_to_payload(self):
        data = categories_to_payload(default_categories())
        assert data[1]["key"] == "mano_obra"
        assert data[1]["items"] == [{"description": "", "unitPrice": "", "quantity": ""}]
