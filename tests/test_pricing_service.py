"""
Testes da Calculadora de Preços
===============================
Derivação do desconto, reconciliação do trio e classificação de estoque
"""

import pytest

from storefront.api.schemas.products.price import StorageTier
from storefront.api.services import pricing_service
from storefront.core.utils.enums import PriceSource, StockStatus


# ═══════════════════════════════════════════════════════════
# DERIVAÇÃO
# ═══════════════════════════════════════════════════════════

class TestDerivation:

    def test_discount_price_from_percent(self):
        assert pricing_service.derive_discount_price(1000, 10) == 900

    def test_discount_price_rounds_half_up(self):
        # 999 * 0.5 = 499.5 -> 500
        assert pricing_service.derive_discount_price(999, 50) == 500

    def test_discount_price_is_clamped(self):
        assert pricing_service.derive_discount_price(1000, 150) == 0
        assert pricing_service.derive_discount_price(1000, -20) == 1000

    def test_fractional_regular_never_exceeded(self):
        # 99.5 arredondaria para 100; o teto é a parte inteira do regular
        assert pricing_service.derive_discount_price("99.5", 0) == 99
        assert pricing_service.derive_discount_price(99.5, 0) <= 99.5
        assert pricing_service.derive_discount_price("19.9", 10) == 18

    def test_discount_percent_from_price(self):
        assert pricing_service.derive_discount_percent(1200, 1100) == 8

    def test_discount_percent_zero_when_regular_is_zero(self):
        assert pricing_service.derive_discount_percent(0, 100) == 0

    def test_discount_percent_is_clamped(self):
        assert pricing_service.derive_discount_percent(100, 250) == 0
        assert pricing_service.derive_discount_percent(100, -50) == 100

    def test_accepts_form_text(self):
        assert pricing_service.derive_discount_price("1000", "25") == 750
        assert pricing_service.derive_discount_percent("", "10") == 0


# ═══════════════════════════════════════════════════════════
# ESTOQUE
# ═══════════════════════════════════════════════════════════

class TestClassifyStock:

    @pytest.mark.parametrize("quantity, alert, expected", [
        (0, 5, StockStatus.OUT_OF_STOCK),
        (5, 5, StockStatus.LOW_STOCK),
        (6, 5, StockStatus.IN_STOCK),
        (1, 0, StockStatus.IN_STOCK),
    ])
    def test_boundaries(self, quantity, alert, expected):
        assert pricing_service.classify_stock(quantity, alert) == expected

    def test_default_alert(self):
        assert pricing_service.classify_stock(5) == StockStatus.LOW_STOCK
        assert pricing_service.classify_stock("6", "") == StockStatus.IN_STOCK

    def test_classify_record(self):
        record = StorageTier(stock_quantity="3", low_stock_alert="3")
        assert pricing_service.classify_record(record) == StockStatus.LOW_STOCK


class TestConsistency:

    def test_within_tolerance(self):
        assert pricing_service.is_consistent(1000, 900, 10)
        assert pricing_service.is_consistent(1000, 901, 10)

    def test_outside_tolerance(self):
        assert not pricing_service.is_consistent(1000, 950, 10)


# ═══════════════════════════════════════════════════════════
# RECONCILIAÇÃO
# ═══════════════════════════════════════════════════════════

class TestPriceEdits:

    def test_percent_edit_recomputes_price(self):
        record = StorageTier(regular_price="1000")
        pricing_service.apply_price_edit(record, "discount_percent", 20)

        assert record.discount_percent == "20"
        assert record.discount_price == "800"
        assert record.price_source == PriceSource.PERCENT

    def test_price_edit_recomputes_percent(self):
        record = StorageTier(regular_price="1000")
        pricing_service.apply_price_edit(record, "discount_price", "950")

        assert record.discount_percent == "5"
        assert record.price_source == PriceSource.PRICE

    def test_regular_edit_keeps_last_edited_side(self):
        record = StorageTier(regular_price="1000")
        pricing_service.apply_price_edit(record, "discount_percent", "10")
        pricing_service.apply_price_edit(record, "regular_price", "2000")

        assert record.discount_percent == "10"
        assert record.discount_price == "1800"

    def test_non_triad_field_is_rejected(self):
        with pytest.raises(ValueError):
            pricing_service.apply_price_edit(StorageTier(), "stock_quantity", "3")

    def test_fill_missing_does_not_overwrite(self):
        record = StorageTier(regular_price="1000", discount_price="950", discount_percent="10")
        pricing_service.fill_missing(record)

        assert record.discount_price == "950"
        assert record.discount_percent == "10"

    def test_fill_missing_completes_price(self):
        record = StorageTier(regular_price="1000", discount_percent="10")
        pricing_service.fill_missing(record)

        assert record.discount_price == "900"


class TestReconcile:

    def test_returns_copy(self):
        record = StorageTier(regular_price="1000", discount_price="950", discount_percent="10")
        result = pricing_service.reconcile(record)

        assert result is not record
        assert record.discount_percent == "10"

    def test_discount_price_wins_without_history(self):
        record = StorageTier(regular_price="1000", discount_price="950", discount_percent="10")
        result = pricing_service.reconcile(record)

        assert result.discount_price == "950"
        assert result.discount_percent == "5"

    def test_last_edited_percent_wins(self):
        record = StorageTier(regular_price="1000")
        pricing_service.apply_price_edit(record, "discount_percent", "10")
        record.discount_price = "500"

        result = pricing_service.reconcile(record)

        assert result.discount_price == "900"

    def test_consistent_record_is_untouched(self):
        record = StorageTier(regular_price="1000", discount_price="901", discount_percent="10")
        result = pricing_service.reconcile(record)

        assert result.discount_price == "901"
        assert result.discount_percent == "10"

    def test_without_regular_price(self):
        record = StorageTier(discount_price="10")
        result = pricing_service.reconcile(record)

        assert result.discount_percent == ""
