# storefront/core/helpers/formatting.py
"""
Conversões entre os valores numéricos do backend e os campos de texto do
formulário de edição.
"""

import base64
import math
import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import List, Optional, Union

Number = Union[int, float]


def to_form_str(value) -> str:
    """
    Converte um valor do backend para o texto exibido no input.
    None vira "", inteiros não ganham ".0".
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float, Decimal)):
        number = parse_number(value)
        if number is None:
            return ""
        return str(number)
    return str(value).strip()


def parse_number(value) -> Optional[Number]:
    """
    Interpreta texto ou número. Retorna None quando vazio ou inválido.
    Valores inteiros voltam como int.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    if number == number.to_integral_value():
        return int(number)
    as_float = float(number)
    if math.isnan(as_float) or math.isinf(as_float):
        return None
    return as_float


def to_number(value, default: Number = 0) -> Number:
    """Equivalente a Number(x) || 0: valor inválido contribui com o padrão."""
    number = parse_number(value)
    return default if number is None else number


def to_int(value, default: int = 0) -> int:
    number = parse_number(value)
    if number is None:
        return default
    return int(Decimal(str(number)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def split_csv(text: Optional[str]) -> List[str]:
    """'a, b ,c' -> ['a', 'b', 'c'] (itens vazios são descartados)."""
    if not text:
        return []
    return [item.strip() for item in str(text).split(",") if item.strip()]


def join_csv(items) -> str:
    if not items:
        return ""
    if isinstance(items, str):
        return items
    return ", ".join(str(item) for item in items)


_SLUG_INVALID = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACES = re.compile(r"\s+")
_SLUG_DASHES = re.compile(r"-+")


def slugify(text: str) -> str:
    slug = _SLUG_INVALID.sub("", (text or "").lower())
    slug = _SLUG_SPACES.sub("-", slug)
    slug = _SLUG_DASHES.sub("-", slug)
    return slug.strip("-")


def to_data_uri(content: bytes, content_type: Optional[str]) -> str:
    """Pré-visualização local da imagem, sem upload."""
    encoded = base64.b64encode(content).decode("utf-8")
    return f"data:{content_type or 'application/octet-stream'};base64,{encoded}"
