# storefront/api/services/product_summary_service.py
"""
Leituras derivadas do documento do backend para vitrine e tabela do admin:
preço padrão exibido no card e o resumo da linha da listagem.
"""

from typing import Any, Dict, Mapping, Optional

from storefront.api.schemas.products.summary import DefaultPrice, ProductSummary
from storefront.api.services import pricing_service
from storefront.core.helpers.formatting import to_int, to_number
from storefront.core.utils.enums import ListStatus, ProductType, StockStatus

PLACEHOLDER_IMAGE = "/placeholder.svg"


def _pick_default(items) -> Optional[Dict[str, Any]]:
    """Item marcado como padrão, senão o primeiro."""
    if not isinstance(items, list):
        return None
    rows = [item for item in items if isinstance(item, dict)]
    if not rows:
        return None
    return next((row for row in rows if row.get("isDefault")), rows[0])


def _or_chain(data: Mapping[str, Any], *keys) -> float:
    """Number(a || b || c) || 0"""
    for key in keys:
        value = data.get(key)
        if value:
            return to_number(value)
    return 0


def extract_default_price(document: Dict[str, Any]) -> DefaultPrice:
    """
    Preço padrão do produto conforme o formato:
    - network/region: eixo padrão -> armazenamento padrão -> price
    - basic: cor padrão
    Com fallback para os campos legados de topo.
    """
    document = document if isinstance(document, dict) else {}
    product_type = ProductType.resolve(document.get("productType") or document.get("type"))

    regular = discount = stock = 0
    if product_type in (ProductType.NETWORK, ProductType.REGION):
        axes_key = "networks" if product_type == ProductType.NETWORK else "regions"
        axis = _pick_default(document.get(axes_key))
        storage = _pick_default(axis.get("defaultStorages")) if axis else None
        if storage and isinstance(storage.get("price"), dict):
            price = storage["price"]
            regular = _or_chain(price, "regular", "regularPrice")
            discount = _or_chain(price, "discount", "discountPrice", "final")
            stock = price.get("stockQuantity") or storage.get("stock")
            stock = to_int(stock)
    else:
        color = _pick_default(document.get("directColors"))
        if color:
            regular = to_number(color.get("regularPrice"))
            discount = to_number(color.get("discountPrice"))
            stock = to_int(color.get("stockQuantity"))

    if regular == 0 and discount == 0:
        regular = _or_chain(document, "price", "regularPrice")
        discount = _or_chain(document, "discountPrice")
        stock = to_int(document.get("stock") or document.get("stockQuantity"))

    if discount == 0:
        discount = regular

    has_discount = 0 < discount < regular
    if has_discount:
        percent = pricing_service.derive_discount_percent(regular, discount)
    else:
        percent = to_int(document.get("discountPercent"))

    return DefaultPrice(
        regular_price=regular,
        discount_price=discount,
        has_discount=has_discount,
        discount=percent,
        stock_quantity=stock,
    )


def display_price(document: Dict[str, Any], price_type: Optional[str] = None) -> float:
    """Preço do carrinho: 'regular' usa o preço cheio, o resto usa o desconto."""
    price = extract_default_price(document)
    if price_type == "regular":
        return price.regular_price
    return price.discount_price


def is_out_of_stock(document: Dict[str, Any]) -> bool:
    return extract_default_price(document).stock_quantity == 0


def _thumbnail_url(document: Dict[str, Any]) -> str:
    images = [img for img in document.get("images") or [] if isinstance(img, dict)]
    if images:
        thumb = next((img for img in images if img.get("isThumbnail")), None)
        for candidate in (thumb, images[0]):
            if candidate and (candidate.get("imageUrl") or candidate.get("url")):
                return candidate.get("imageUrl") or candidate.get("url")
        return PLACEHOLDER_IMAGE
    return document.get("image") or PLACEHOLDER_IMAGE


def _list_status(document: Dict[str, Any], stock: int) -> ListStatus:
    if not document.get("isActive"):
        return ListStatus.INACTIVE
    status = pricing_service.classify_stock(stock, document.get("lowStockAlert") or None)
    if status == StockStatus.OUT_OF_STOCK:
        return ListStatus.OUT_OF_STOCK
    if status == StockStatus.LOW_STOCK:
        return ListStatus.LOW_STOCK
    return ListStatus.ACTIVE


def summarize_for_list(
        document: Dict[str, Any],
        category_names: Optional[Mapping[str, str]] = None,
) -> ProductSummary:
    """Converte o documento "lite" da listagem em uma linha da tabela."""
    document = document if isinstance(document, dict) else {}
    category_names = category_names or {}

    stock_raw = document.get("totalStock")
    if stock_raw is None:
        stock_raw = document.get("stockQuantity")
    stock = to_int(stock_raw)

    price_raw = document.get("price")
    if price_raw is None:
        price_raw = (document.get("priceRange") or {}).get("min")
    price = to_number(price_raw)

    category_ids = document.get("categoryIds")
    if not isinstance(category_ids, list):
        category_ids = [document["categoryId"]] if document.get("categoryId") else []
    category_ids = [str(c) for c in category_ids]
    category = next((category_names[c] for c in category_ids if c in category_names), "Uncategorized")

    return ProductSummary(
        id=str(document["id"]) if document.get("id") is not None else None,
        name=document.get("name") or "",
        image=_thumbnail_url(document),
        sku=document.get("sku") or "",
        product_code=document.get("productCode") or "",
        slug=document.get("slug") or "",
        category_ids=category_ids,
        category=category,
        price=price,
        stock=stock,
        status=_list_status(document, stock),
        description=document.get("description") or "",
        type=ProductType.resolve(document.get("productType")),
    )
