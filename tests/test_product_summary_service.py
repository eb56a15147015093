"""
Testes do Resumo de Produto
===========================
Preço padrão exibido e linha da listagem do admin
"""

import pytest

from storefront.api.services.product_summary_service import (
    display_price,
    extract_default_price,
    is_out_of_stock,
    summarize_for_list,
)
from storefront.core.utils.enums import ListStatus, ProductType


# ═══════════════════════════════════════════════════════════
# PREÇO PADRÃO
# ═══════════════════════════════════════════════════════════

class TestDefaultPrice:

    def test_network_uses_default_axis_and_storage(self):
        document = {
            "productType": "network",
            "networks": [
                {"networkName": "4G", "defaultStorages": [{"price": {"regular": 10, "discount": 5}}]},
                {
                    "networkName": "5G",
                    "isDefault": True,
                    "defaultStorages": [
                        {"price": {"regular": 2000}},
                        {"isDefault": True, "price": {"regular": 1000, "discount": 900, "stockQuantity": 7}},
                    ],
                },
            ],
        }
        price = extract_default_price(document)

        assert price.regular_price == 1000
        assert price.discount_price == 900
        assert price.has_discount is True
        assert price.discount == 10
        assert price.stock_quantity == 7

    def test_basic_uses_direct_colors(self):
        document = {
            "productType": "basic",
            "directColors": [{"regularPrice": 500, "discountPrice": 450, "stockQuantity": 0}],
        }
        price = extract_default_price(document)

        assert price.discount_price == 450
        assert is_out_of_stock(document) is True

    def test_legacy_fallback(self):
        price = extract_default_price({"price": 300, "stock": 4})

        assert price.regular_price == 300
        assert price.discount_price == 300
        assert price.has_discount is False
        assert price.stock_quantity == 4

    def test_discount_percent_without_discount(self):
        price = extract_default_price({"price": 300, "discountPercent": 15})

        assert price.has_discount is False
        assert price.discount == 15

    def test_malformed_document(self):
        price = extract_default_price({"productType": "region", "regions": "oops"})

        assert price.regular_price == 0
        assert price.stock_quantity == 0

    def test_display_price(self):
        document = {"directColors": [{"regularPrice": 100, "discountPrice": 80, "stockQuantity": 3}]}

        assert display_price(document) == 80
        assert display_price(document, "regular") == 100
        assert is_out_of_stock(document) is False


# ═══════════════════════════════════════════════════════════
# LISTAGEM
# ═══════════════════════════════════════════════════════════

class TestSummary:

    def test_summary_fields(self):
        summary = summarize_for_list(
            {
                "id": 12,
                "name": "Phone X",
                "sku": "PX",
                "productType": "network",
                "isActive": True,
                "totalStock": 40,
                "priceRange": {"min": 900},
                "categoryIds": ["c1", "c2"],
                "images": [
                    {"imageUrl": "https://cdn.test/1.jpg"},
                    {"imageUrl": "https://cdn.test/thumb.jpg", "isThumbnail": True},
                ],
            },
            {"c2": "Phones"},
        )

        assert summary.id == "12"
        assert summary.price == 900
        assert summary.stock == 40
        assert summary.category == "Phones"
        assert summary.image == "https://cdn.test/thumb.jpg"
        assert summary.status == ListStatus.ACTIVE
        assert summary.type == ProductType.NETWORK

    @pytest.mark.parametrize("document, expected", [
        ({"isActive": False, "totalStock": 50}, ListStatus.INACTIVE),
        ({"isActive": True, "totalStock": 0}, ListStatus.OUT_OF_STOCK),
        ({"isActive": True, "totalStock": 5}, ListStatus.LOW_STOCK),
        ({"isActive": True, "stockQuantity": 3, "lowStockAlert": 2}, ListStatus.ACTIVE),
    ])
    def test_status(self, document, expected):
        assert summarize_for_list(document).status == expected

    def test_defaults(self):
        summary = summarize_for_list({"categoryId": "c9"})

        assert summary.image == "/placeholder.svg"
        assert summary.category == "Uncategorized"
        assert summary.category_ids == ["c9"]
        assert summary.type == ProductType.BASIC
