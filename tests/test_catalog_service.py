"""Tests for loading and normalizing the product/kit catalog."""

from decimal import Decimal

from domain.errors import CatalogLoadFailure
from services.catalog_service import (
    ALL_CATEGORIES,
    load_catalog,
    normalize_kit_row,
    normalize_product_row,
)


def _seed(client):
    client.tables["products"] = [
        {"id": "p1", "name_en": "Apron", "name_fr": "Tablier", "category": "Uniforms",
         "price": 5, "images": ["a.png"], "sizes": None, "is_active": True},
        {"id": "p2", "name_en": "Polo", "name_fr": "Polo", "category": "Uniforms",
         "price": "24.50", "images": [], "sizes": ["S", "M"], "is_active": True},
        {"id": "p9", "name_en": "Old", "name_fr": "Vieux", "category": "Retired",
         "price": 1, "images": [], "is_active": False},
    ]
    client.tables["kits"] = [
        {"id": "k1", "name_en": "Opening Kit", "name_fr": "Ensemble", "category": "Kits",
         "images": [], "products": ["Apron x4"], "price": 150, "is_active": True},
    ]


class TestLoadCatalog:
    def test_loads_only_active_rows(self, fake_client):
        _seed(fake_client)
        catalog = load_catalog(fake_client)

        assert catalog.error is None
        assert [p.id for p in catalog.products] == ["p1", "p2"]
        assert [k.id for k in catalog.kits] == ["k1"]

    def test_kits_are_priced_zero(self, fake_client):
        _seed(fake_client)
        kit = load_catalog(fake_client).kits[0]

        assert kit.is_kit
        assert kit.price == Decimal("0")
        assert kit.products == ["Apron x4"]

    def test_failure_yields_empty_catalog_with_error(self, fake_client):
        _seed(fake_client)
        fake_client.fail("kits", "select")

        catalog = load_catalog(fake_client)

        assert isinstance(catalog.error, CatalogLoadFailure)
        assert catalog.products == []
        assert catalog.kits == []

    def test_malformed_row_is_a_load_failure(self, fake_client):
        fake_client.tables["products"] = [{"name_en": "no id", "is_active": True}]
        fake_client.tables["kits"] = []

        catalog = load_catalog(fake_client)

        assert isinstance(catalog.error, CatalogLoadFailure)


class TestCatalogHelpers:
    def test_categories_filter_and_find(self, fake_client):
        _seed(fake_client)
        catalog = load_catalog(fake_client)

        assert catalog.categories() == [ALL_CATEGORIES, "Uniforms", "Kits"]
        assert [i.id for i in catalog.filter("Kits")] == ["k1"]
        assert len(catalog.filter(ALL_CATEGORIES)) == 3
        assert catalog.find("p2").sizes == ["S", "M"]
        assert catalog.find("missing") is None


class TestNormalize:
    def test_product_price_becomes_decimal(self):
        item = normalize_product_row({"id": 7, "name_en": "Cap", "category": "Hats", "price": 12.5})

        assert item.id == "7"
        assert item.price == Decimal("12.5")
        assert item.name_fr == "Cap"
        assert item.sizes is None

    def test_empty_sizes_mean_no_sizes(self):
        item = normalize_product_row({"id": "p", "name_en": "Cap", "category": "Hats",
                                      "price": 1, "sizes": []})
        assert item.sizes is None

    def test_kit_flag_forced(self):
        item = normalize_kit_row({"id": "k", "name_en": "Kit", "category": "Kits", "price": 99})
        assert item.is_kit
        assert item.price == 0
