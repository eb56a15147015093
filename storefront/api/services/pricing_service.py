# storefront/api/services/pricing_service.py
"""
Calculadora de Preços
=====================

Funções puras que mantêm o trio (preço regular, preço com desconto,
percentual de desconto) consistente e classificam o estoque.

Regra: discount_price = round(regular * (1 - percent / 100)), com
arredondamento "meio para cima" (o mesmo do Math.round do frontend).
"""

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union

from storefront.api.schemas.products.price import PriceFields
from storefront.core.config import config
from storefront.core.helpers.formatting import parse_number, to_form_str
from storefront.core.utils.enums import PriceSource, StockStatus

Numeric = Union[int, float, Decimal, str]


def _to_decimal(value: Numeric) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        number = Decimal(str(value).strip() or "0")
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return number if number.is_finite() else Decimal(0)


def _round(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def derive_discount_price(regular: Numeric, percent: Numeric) -> int:
    """Preço com desconto a partir do percentual, limitado a [0, regular]."""
    regular_d = max(_to_decimal(regular), Decimal(0))
    percent_d = _to_decimal(percent)
    price = _round(regular_d * (1 - percent_d / 100))
    # Teto inteiro: regular 99.5 com 0% vira 99, nunca acima do regular
    ceiling = int(regular_d.to_integral_value(rounding=ROUND_FLOOR))
    return max(0, min(price, ceiling))


def derive_discount_percent(regular: Numeric, price: Numeric) -> int:
    """Percentual a partir do preço com desconto, limitado a [0, 100]."""
    regular_d = _to_decimal(regular)
    if regular_d <= 0:
        return 0
    price_d = _to_decimal(price)
    percent = _round((regular_d - price_d) / regular_d * 100)
    return max(0, min(percent, 100))


def classify_stock(quantity: Numeric, low_stock_alert: Optional[Numeric] = None) -> StockStatus:
    """
    OutOfStock  -> quantidade == 0
    LowStock    -> 0 < quantidade <= alerta
    InStock     -> demais casos
    """
    if low_stock_alert is None or (isinstance(low_stock_alert, str) and not low_stock_alert.strip()):
        low_stock_alert = config.DEFAULT_LOW_STOCK_ALERT
    quantity_d = _to_decimal(quantity)
    if quantity_d <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity_d <= _to_decimal(low_stock_alert):
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def classify_record(record: PriceFields) -> StockStatus:
    return classify_stock(record.stock_quantity, record.low_stock_alert)


def is_consistent(regular: Numeric, price: Numeric, percent: Numeric, tolerance: Optional[int] = None) -> bool:
    tolerance = config.PRICE_TOLERANCE if tolerance is None else tolerance
    expected = derive_discount_price(regular, percent)
    return abs(_to_decimal(price) - expected) <= tolerance


# ═══════════════════════════════════════════════════════════
# RECONCILIAÇÃO DO TRIO DE PREÇO
# ═══════════════════════════════════════════════════════════

def apply_price_edit(record: PriceFields, field: str, value) -> None:
    """
    Aplica a edição de um campo do trio e recalcula o outro lado.
    O último campo editado (preço ou percentual) passa a ser o autoritativo.
    """
    text = to_form_str(value)
    if field == "discount_percent":
        record.discount_percent = text
        record._price_source = PriceSource.PERCENT
    elif field == "discount_price":
        record.discount_price = text
        record._price_source = PriceSource.PRICE
    elif field == "regular_price":
        record.regular_price = text
    else:
        raise ValueError(f"Campo fora do trio de preço: {field}")
    _recompute(record, record._price_source)


def fill_missing(record: PriceFields) -> None:
    """
    Completa o lado ausente do trio sem sobrescrever dados existentes.
    Usado na hidratação.
    """
    has_price = parse_number(record.discount_price) is not None
    has_percent = parse_number(record.discount_percent) is not None
    if parse_number(record.regular_price) is None:
        return
    if has_percent and not has_price:
        _recompute(record, PriceSource.PERCENT)
    elif has_price and not has_percent:
        _recompute(record, PriceSource.PRICE)


def reconcile(record: PriceFields, tolerance: Optional[int] = None) -> PriceFields:
    """
    Garante a equação antes do envio. Retorna uma cópia; o registro original
    não é alterado. Sem histórico de edição, o preço com desconto prevalece.
    """
    result = record.model_copy(deep=True)
    regular = parse_number(result.regular_price)
    price = parse_number(result.discount_price)
    percent = parse_number(result.discount_percent)
    if regular is None:
        return result
    if price is None and percent is None:
        return result
    if price is None or percent is None:
        fill_missing(result)
        return result
    if is_consistent(regular, price, percent, tolerance):
        return result
    source = record.price_source or PriceSource.PRICE
    _recompute(result, source)
    return result


def _recompute(record: PriceFields, source: Optional[PriceSource]) -> None:
    regular = parse_number(record.regular_price)
    if regular is None:
        return
    if source is None:
        # Regular editado sem histórico: o lado preenchido é a referência
        if parse_number(record.discount_percent) is not None:
            source = PriceSource.PERCENT
        elif parse_number(record.discount_price) is not None:
            source = PriceSource.PRICE
        else:
            return
    if source == PriceSource.PERCENT:
        if parse_number(record.discount_percent) is None:
            return
        record.discount_price = str(derive_discount_price(regular, record.discount_percent))
    else:
        if parse_number(record.discount_price) is None:
            return
        record.discount_percent = str(derive_discount_percent(regular, record.discount_price))
