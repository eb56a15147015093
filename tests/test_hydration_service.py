"""
Testes da Hidratação
====================
Documento do backend -> árvore editável
"""

import pytest
from pydantic import ValidationError

from storefront.api.schemas.products.axis import NetworkAxis
from storefront.api.schemas.products.product import NetworkVariants
from storefront.api.services.hydration_service import hydrate_product
from storefront.core.utils.enums import ProductType


# ═══════════════════════════════════════════════════════════
# FORMATO DO PRODUTO
# ═══════════════════════════════════════════════════════════

class TestShape:

    def test_network_shape_is_exclusive(self, network_product):
        assert network_product.product_type == ProductType.NETWORK
        assert isinstance(network_product.variants, NetworkVariants)
        assert len(network_product.networks) == 2
        assert network_product.colors == []
        assert network_product.regions == []

    def test_region_shape(self, region_product):
        assert region_product.product_type == ProductType.REGION
        assert [r.name for r in region_product.regions] == ["Global"]
        assert region_product.networks == []

    def test_basic_reads_direct_colors(self, basic_product):
        assert basic_product.product_type == ProductType.BASIC
        assert [c.color_name for c in basic_product.colors] == ["Green", "Pink"]
        assert basic_product.axes == []

    def test_unknown_type_falls_back_to_basic(self):
        product = hydrate_product({"productType": "bundle", "name": "X", "networks": [{"networkName": "5G"}]})

        assert product.product_type == ProductType.BASIC
        assert product.networks == []

    def test_shape_cannot_be_reassigned(self, network_product):
        with pytest.raises(ValidationError):
            network_product.variants = NetworkVariants()


# ═══════════════════════════════════════════════════════════
# PREÇOS E ESTOQUE
# ═══════════════════════════════════════════════════════════

class TestPrices:

    def test_nested_price_is_flattened(self, network_product):
        tier = network_product.networks[0].default_storages[0]

        assert tier.regular_price == "1000"
        assert tier.discount_percent == "10"
        assert tier.discount_price == "900"
        assert tier.stock_quantity == "7"

    def test_product_low_stock_alert_is_inherited(self, network_product):
        assert network_product.networks[0].default_storages[0].low_stock_alert == "3"

    def test_missing_percent_is_derived(self, network_product):
        storage = network_product.networks[0].colors[1].storages[0]

        assert storage.discount_price == "1100"
        assert storage.discount_percent == "8"

    def test_flat_prices(self, region_product):
        tier = region_product.regions[0].default_storages[0]

        assert tier.regular_price == "800"
        assert tier.discount_price == "720"
        assert tier.discount_percent == "10"
        assert tier.low_stock_alert == "5"

    def test_single_price_color(self, network_product):
        color = network_product.networks[1].colors[0]

        assert color.has_storage is False
        assert color.single_price == "500"
        assert color.single_compare_price == "550"
        assert color.single_stock_quantity == "4"


# ═══════════════════════════════════════════════════════════
# IDENTIDADE E ORDEM
# ═══════════════════════════════════════════════════════════

class TestIdentity:

    def test_backend_ids_are_kept(self, network_product):
        network = network_product.networks[0]

        assert network.id.key == "n-1"
        assert not network.id.is_new
        assert network.default_storages[0].id.wire_id == "st-1"

    def test_missing_ids_become_placeholders(self):
        product = hydrate_product({
            "productType": "network",
            "networks": [{"networkName": "5G", "colors": [{"colorName": "Black"}]}],
        })
        network = product.networks[0]

        assert network.id.is_new
        assert network.id.key.startswith("network-")
        assert network.colors[0].id.key.startswith("color-")

    def test_items_are_sorted_by_display_order(self):
        product = hydrate_product({
            "productType": "region",
            "regions": [
                {"id": "b", "regionName": "B", "displayOrder": 2},
                {"id": "a", "regionName": "A", "displayOrder": 1},
            ],
        })

        assert [r.name for r in product.regions] == ["A", "B"]
        assert [r.display_order for r in product.regions] == [0, 1]

    def test_hydration_is_idempotent(self, network_document):
        first = hydrate_product(network_document)
        second = hydrate_product(network_document)

        assert first.variants.model_dump() == second.variants.model_dump()
        assert first.gallery == second.gallery


# ═══════════════════════════════════════════════════════════
# DEFAULTS E CAMPOS AUXILIARES
# ═══════════════════════════════════════════════════════════

class TestDefaults:

    def test_empty_document(self):
        product = hydrate_product({})

        assert product.product_type == ProductType.BASIC
        assert product.product_id is None
        assert product.name == ""
        assert product.is_active is True
        assert product.is_pre_order is False
        assert len(product.specifications) == 1
        assert len(product.videos) == 1

    def test_none_document(self):
        assert hydrate_product(None).product_type == ProductType.BASIC

    def test_malformed_lists_are_ignored(self):
        product = hydrate_product({"productType": "network", "networks": "oops", "images": {"x": 1}})

        assert product.networks == []
        assert product.gallery == []

    def test_network_default_storages_flag_is_inferred(self):
        product = hydrate_product({
            "productType": "network",
            "networks": [
                {"networkName": "A", "defaultStorages": [{"storageSize": "64GB", "regularPrice": 1}]},
                {"networkName": "B"},
            ],
        })

        assert isinstance(product.networks[0], NetworkAxis)
        assert product.networks[0].has_default_storages is True
        assert product.networks[1].has_default_storages is False

    def test_thumbnail_is_split_from_gallery(self, network_product):
        assert network_product.thumbnail.url == "https://cdn.test/phone-x-thumb.jpg"
        assert [img.url for img in network_product.gallery] == ["https://cdn.test/phone-x-front.jpg"]
        assert network_product.gallery[0].alt_text == "front"

    def test_slug_is_locked_when_present(self, network_product, basic_product):
        assert network_product.slug_locked is True
        assert basic_product.slug_locked is False

    def test_lists_become_form_text(self, basic_product):
        assert basic_product.tags == "case, silicone"
        assert basic_product.specifications[0].key == "Material"
        assert basic_product.videos[0].url == "https://youtu.be/abc"

    def test_category_fallback(self):
        product = hydrate_product({"categoryId": 7, "brandId": "b"})

        assert product.category_ids == ["7"]
        assert product.brand_ids == ["b"]

    def test_seo_block(self):
        product = hydrate_product({
            "seo": {"title": "T", "keywords": ["a", "b"], "canonical": "https://x.test/p"},
            "seoDescription": "D",
        })

        assert product.seo.title == "T"
        assert product.seo.description == "D"
        assert product.seo.keywords == "a, b"
        assert product.seo.canonical_url == "https://x.test/p"
