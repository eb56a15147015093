# storefront/api/services/hydration_service.py
"""
Hidratação: documento do backend -> árvore editável do formulário.

- preços aninhados em `price` viram campos de texto planos
- ids do backend são mantidos; ausentes viram placeholders locais
- a miniatura é separada de `images[]` pelo flag `isThumbnail`
- campos ausentes ou malformados viram "" / [] / False, nunca exceção
"""

import logging
from typing import Any, Dict, List, Optional

from storefront.api.schemas.products.axis import NetworkAxis, RegionAxis
from storefront.api.schemas.products.color import AxisColor, BasicColor
from storefront.api.schemas.products.media import GalleryImage, ThumbnailImage
from storefront.api.schemas.products.price import StorageTier
from storefront.api.schemas.products.product import (
    BasicVariants,
    NetworkVariants,
    ProductForm,
    RegionVariants,
    SeoBlock,
    SpecificationRow,
    VideoRow,
)
from storefront.api.services import pricing_service
from storefront.core.config import config
from storefront.core.helpers.formatting import join_csv, to_form_str
from storefront.core.helpers.identity import (
    COLOR_PREFIX,
    DEFAULT_STORAGE_PREFIX,
    EntityId,
    NETWORK_PREFIX,
    REGION_PREFIX,
    SPEC_PREFIX,
    STORAGE_PREFIX,
    VIDEO_PREFIX,
)
from storefront.core.utils.enums import ProductType, VideoType

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════
# HELPERS DE LEITURA TOLERANTE
# ═══════════════════════════════════════════════════════════

def _as_dict(value) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value) -> List[Any]:
    return value if isinstance(value, list) else []


def _first(data: Dict[str, Any], *keys, default=None):
    """Primeiro valor não vazio entre as chaves (equivalente a a || b || c)."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return default


def _first_present(data: Dict[str, Any], *keys, default=None):
    """Como _first, mas aceita zero e False (equivalente a a ?? b)."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def _text(value) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return to_form_str(value)


def _ordered(items: List[Any]) -> List[Dict[str, Any]]:
    """Ordena por displayOrder (estável); itens sem ordem mantêm a posição."""
    rows = [item for item in items if isinstance(item, dict)]
    indexed = list(enumerate(rows))

    def sort_key(pair):
        index, row = pair
        order = row.get("displayOrder")
        if isinstance(order, bool) or not isinstance(order, (int, float)):
            order = index
        return (order, index)

    return [row for _, row in sorted(indexed, key=sort_key)]


def _flag(value, default: bool) -> bool:
    """isActive !== false (default True) ou isPreOrder === true (default False)."""
    if default:
        return value is not False
    return value is True


# ═══════════════════════════════════════════════════════════
# PREÇOS
# ═══════════════════════════════════════════════════════════

def _price_kwargs(raw: Dict[str, Any], fallback_alert) -> Dict[str, str]:
    price = _as_dict(raw.get("price"))
    merged = {**raw, **{k: v for k, v in price.items() if v is not None}}
    campaign = _as_dict(merged.get("campaignWindow"))
    low_stock = _first_present(merged, "lowStockAlert", default=fallback_alert)
    return {
        "regular_price": _text(_first_present(merged, "regularPrice", "regular")),
        "discount_price": _text(_first_present(merged, "discountPrice", "discount")),
        "discount_percent": _text(merged.get("discountPercent")),
        "stock_quantity": _text(_first_present(merged, "stockQuantity", "stock")),
        "campaign_price": _text(merged.get("campaignPrice")),
        "campaign_start": _text(_first(merged, "campaignStart", default=campaign.get("start"))),
        "campaign_end": _text(_first(merged, "campaignEnd", default=campaign.get("end"))),
        "low_stock_alert": _text(low_stock) or str(config.DEFAULT_LOW_STOCK_ALERT),
    }


def _storage(raw: Dict[str, Any], index: int, prefix: str, fallback_alert) -> StorageTier:
    tier = StorageTier(
        id=EntityId.from_backend(raw.get("id"), prefix),
        storage_size=_text(_first(raw, "storageSize", "size", "name")),
        display_order=index,
        **_price_kwargs(raw, fallback_alert),
    )
    pricing_service.fill_missing(tier)
    return tier


def _storages(items, prefix: str, fallback_alert) -> List[StorageTier]:
    return [
        _storage(raw, index, prefix, fallback_alert)
        for index, raw in enumerate(_ordered(_as_list(items)))
    ]


# ═══════════════════════════════════════════════════════════
# CORES
# ═══════════════════════════════════════════════════════════

def _basic_color(raw: Dict[str, Any], index: int, fallback_alert) -> BasicColor:
    color = BasicColor(
        id=EntityId.from_backend(raw.get("id"), COLOR_PREFIX),
        color_name=_text(_first(raw, "colorName", "name")),
        color_image=_text(_first(raw, "colorImage", "image")),
        display_order=index,
        **_price_kwargs(raw, fallback_alert),
    )
    pricing_service.fill_missing(color)
    return color


def _axis_color(raw: Dict[str, Any], index: int, fallback_alert) -> AxisColor:
    storages = _storages(raw.get("storages"), STORAGE_PREFIX, fallback_alert)

    single_price = _first_present(raw, "singlePrice", "regularPrice")
    has_storage = raw.get("hasStorage")
    if not isinstance(has_storage, bool):
        has_storage = bool(storages) or single_price is None
    use_default = raw.get("useDefaultStorages")
    if not isinstance(use_default, bool):
        use_default = not storages

    return AxisColor(
        id=EntityId.from_backend(raw.get("id"), COLOR_PREFIX),
        color_name=_text(_first(raw, "colorName", "name")),
        color_image=_text(_first(raw, "colorImage", "image")),
        display_order=index,
        has_storage=has_storage,
        use_default_storages=use_default,
        single_price=_text(single_price),
        single_compare_price=_text(_first_present(raw, "singleComparePrice", "comparePrice")),
        single_stock_quantity=_text(_first_present(raw, "singleStockQuantity", "stockQuantity")),
        storages=storages,
    )


def _axis_colors(items, fallback_alert) -> List[AxisColor]:
    return [
        _axis_color(raw, index, fallback_alert)
        for index, raw in enumerate(_ordered(_as_list(items)))
    ]


# ═══════════════════════════════════════════════════════════
# EIXOS (REDE / REGIÃO)
# ═══════════════════════════════════════════════════════════

def _network(raw: Dict[str, Any], index: int, fallback_alert) -> NetworkAxis:
    default_storages = _storages(raw.get("defaultStorages"), DEFAULT_STORAGE_PREFIX, fallback_alert)
    has_defaults = raw.get("hasDefaultStorages")
    if not isinstance(has_defaults, bool):
        has_defaults = bool(default_storages)
    return NetworkAxis(
        id=EntityId.from_backend(raw.get("id"), NETWORK_PREFIX),
        name=_text(_first(raw, "networkName", "name")),
        is_default=raw.get("isDefault") is True,
        display_order=index,
        has_default_storages=has_defaults,
        default_storages=default_storages,
        colors=_axis_colors(raw.get("colors"), fallback_alert),
    )


def _region(raw: Dict[str, Any], index: int, fallback_alert) -> RegionAxis:
    return RegionAxis(
        id=EntityId.from_backend(raw.get("id"), REGION_PREFIX),
        name=_text(_first(raw, "regionName", "name")),
        is_default=raw.get("isDefault") is True,
        display_order=index,
        default_storages=_storages(raw.get("defaultStorages"), DEFAULT_STORAGE_PREFIX, fallback_alert),
        colors=_axis_colors(raw.get("colors"), fallback_alert),
    )


def _variants(product_type: ProductType, document: Dict[str, Any], fallback_alert):
    if product_type == ProductType.NETWORK:
        networks = _ordered(_as_list(document.get("networks")))
        return NetworkVariants(networks=[_network(raw, i, fallback_alert) for i, raw in enumerate(networks)])
    if product_type == ProductType.REGION:
        regions = _ordered(_as_list(document.get("regions")))
        return RegionVariants(regions=[_region(raw, i, fallback_alert) for i, raw in enumerate(regions)])
    colors = _ordered(_as_list(document.get("directColors")) or _as_list(document.get("colors")))
    return BasicVariants(colors=[_basic_color(raw, i, fallback_alert) for i, raw in enumerate(colors)])


# ═══════════════════════════════════════════════════════════
# MÍDIA, SEO, LISTAS AUXILIARES
# ═══════════════════════════════════════════════════════════

def _images(document: Dict[str, Any]):
    # `existingImages` é o formato que o próprio editor envia
    raw_images = _as_list(document.get("images")) or _as_list(document.get("existingImages"))
    images = [img for img in raw_images if isinstance(img, dict)]
    thumb = next((img for img in images if img.get("isThumbnail") is True), None)
    thumbnail = ThumbnailImage(
        url=_text(_first(thumb, "imageUrl", "url")) if thumb else _text(document.get("image"))
    )
    gallery = [
        GalleryImage(
            id=EntityId.from_backend(img.get("id"), "image") if img.get("id") else None,
            url=_text(_first(img, "imageUrl", "url")),
            alt_text=_text(img.get("altText")),
        )
        for img in _ordered(images)
        if img.get("isThumbnail") is not True
    ]
    return thumbnail, gallery


def _seo(document: Dict[str, Any]) -> SeoBlock:
    seo = _as_dict(document.get("seo"))
    keywords = document.get("seoKeywords")
    if keywords is None or keywords == "" or keywords == []:
        keywords = seo.get("keywords")
    return SeoBlock(
        title=_text(_first(document, "seoTitle", default=seo.get("title"))),
        description=_text(_first(document, "seoDescription", default=seo.get("description"))),
        keywords=join_csv(keywords) if isinstance(keywords, (list, str)) else "",
        canonical_url=_text(
            _first(document, "seoCanonical", default=_first(seo, "canonical", "canonicalUrl"))
        ),
    )


def _specifications(document: Dict[str, Any]) -> List[SpecificationRow]:
    rows = [
        SpecificationRow(
            id=EntityId.from_backend(spec.get("id"), SPEC_PREFIX),
            key=_text(_first(spec, "specKey", "key")),
            value=_text(_first(spec, "specValue", "value")),
        )
        for spec in _ordered(_as_list(document.get("specifications")))
    ]
    return rows or [SpecificationRow()]


def _videos(document: Dict[str, Any]) -> List[VideoRow]:
    rows = [
        VideoRow(
            id=EntityId.from_backend(video.get("id"), VIDEO_PREFIX),
            url=_text(_first(video, "videoUrl", "url")),
            type=_text(_first(video, "videoType", "type")) or VideoType.YOUTUBE.value,
        )
        for video in _ordered(_as_list(document.get("videos")))
    ]
    return rows or [VideoRow()]


def _id_list(document: Dict[str, Any], plural: str, singular: str) -> List[str]:
    values = document.get(plural)
    if isinstance(values, list):
        return [str(v) for v in values if v is not None and v != ""]
    single = document.get(singular)
    return [str(single)] if single not in (None, "") else []


# ═══════════════════════════════════════════════════════════
# PONTO DE ENTRADA
# ═══════════════════════════════════════════════════════════

def hydrate_product(document: Optional[Dict[str, Any]]) -> ProductForm:
    """
    Converte o documento do backend na árvore editável.
    Nunca lança exceção por dado malformado.
    """
    document = _as_dict(document)
    product_type = ProductType.resolve(document.get("productType"))
    if document.get("productType") and str(document["productType"]).lower() != product_type.value:
        logger.warning(
            f"⚠️ productType '{document['productType']}' desconhecido para o produto "
            f"{document.get('id')}. Usando 'basic'."
        )

    fallback_alert = _first_present(document, "lowStockAlert", default=config.DEFAULT_LOW_STOCK_ALERT)
    thumbnail, gallery = _images(document)
    slug = _text(document.get("slug"))
    product_id = document.get("id")

    product = ProductForm(
        product_id=str(product_id) if product_id not in (None, "") else None,
        name=_text(document.get("name")),
        slug=slug,
        slug_locked=bool(slug),
        sku=_text(document.get("sku")),
        product_code=_text(document.get("productCode")),
        description=_text(document.get("description")),
        short_description=_text(document.get("shortDescription")),
        warranty=_text(document.get("warranty")),
        category_ids=_id_list(document, "categoryIds", "categoryId"),
        brand_ids=_id_list(document, "brandIds", "brandId"),
        is_active=_flag(document.get("isActive"), True),
        is_online=_flag(document.get("isOnline"), True),
        is_pos=_flag(document.get("isPos"), True),
        is_pre_order=_flag(document.get("isPreOrder"), False),
        is_official=_flag(document.get("isOfficial"), False),
        free_shipping=_flag(document.get("freeShipping"), False),
        is_emi=_flag(document.get("isEmi"), False),
        reward_points=_text(document.get("rewardPoints")),
        min_booking_price=_text(document.get("minBookingPrice")),
        seo=_seo(document),
        tags=join_csv(document.get("tags")) if isinstance(document.get("tags"), (list, str)) else "",
        specifications=_specifications(document),
        videos=_videos(document),
        thumbnail=thumbnail,
        gallery=gallery,
        variants=_variants(product_type, document, fallback_alert),
    )
    logger.info(
        f"📦 Produto {product.product_id or '(novo)'} hidratado como '{product_type.value}'"
    )
    return product
