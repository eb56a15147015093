# storefront/api/services/payload_serializer.py
"""
Serialização: árvore editável -> envio multipart.

O envio tem duas partes:
1. documento JSON com a estrutura do produto
2. lista ordenada de anexos binários (imagens pendentes)

Nas redes/regiões, cada cor com imagem pendente recebe `colorImageIndex`,
a posição do seu arquivo na lista de anexos da parte `colors`. Cores sem
arquivo novo omitem o campo (o backend mantém a imagem atual).

A árvore de origem nunca é alterada.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from storefront.api.schemas.products.axis import NetworkAxis, VariantAxis
from storefront.api.schemas.products.color import AxisColor, BasicColor
from storefront.api.schemas.products.payload import Attachment, SubmissionPayload, ValidationIssue
from storefront.api.schemas.products.price import PriceFields, StorageTier
from storefront.api.schemas.products.product import ProductForm
from storefront.api.services import pricing_service
from storefront.core.helpers.formatting import parse_number, split_csv, to_int, to_number
from storefront.core.helpers.identity import EntityId
from storefront.core.utils.enums import ProductType

logger = logging.getLogger(__name__)

COLOR_PART = "colors"
THUMBNAIL_PART = "thumbnail"
GALLERY_PART = "galleryImages"


class PayloadValidationError(Exception):
    """Produto inválido para envio; nada foi enviado ao backend."""

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        super().__init__("; ".join(f"{i.field}: {i.message}" for i in issues))


def _ordered(items: list) -> list:
    return sorted(items, key=lambda item: item.display_order)


def _with_id(entity_id: Optional[EntityId], data: Dict[str, Any]) -> Dict[str, Any]:
    """Placeholder nunca vai para o backend: linha nova sai sem id."""
    wire_id = entity_id.wire_id if entity_id is not None else None
    if wire_id is not None:
        return {"id": wire_id, **data}
    return data


def _kept_image(url: str, has_pending: bool) -> Optional[str]:
    if has_pending or not url or url.startswith("data:"):
        return None
    return url


# ═══════════════════════════════════════════════════════════
# VALIDAÇÃO
# ═══════════════════════════════════════════════════════════

def _validate_storage(storage: StorageTier, path: str, issues: List[ValidationIssue]) -> None:
    if not storage.storage_size.strip():
        issues.append(ValidationIssue(field=f"{path}.storageSize", message="Storage size is required"))
    regular = parse_number(storage.regular_price)
    if regular is None:
        issues.append(ValidationIssue(field=f"{path}.regularPrice", message="Regular price is required"))
    _validate_price_bounds(storage, path, issues)


def _validate_price_bounds(record: PriceFields, path: str, issues: List[ValidationIssue]) -> None:
    regular = parse_number(record.regular_price)
    price = parse_number(record.discount_price)
    percent = parse_number(record.discount_percent)
    if regular is not None and regular < 0:
        issues.append(ValidationIssue(field=f"{path}.regularPrice", message="Regular price cannot be negative"))
    if regular is not None and price is not None and price > regular:
        issues.append(ValidationIssue(field=f"{path}.discountPrice", message="Discount price cannot exceed regular price"))
    if percent is not None and not 0 <= percent <= 100:
        issues.append(ValidationIssue(field=f"{path}.discountPercent", message="Discount percent must be between 0 and 100"))
    stock = parse_number(record.stock_quantity)
    if stock is not None and stock < 0:
        issues.append(ValidationIssue(field=f"{path}.stockQuantity", message="Stock quantity cannot be negative"))


def _validate_axis_color(color: AxisColor, path: str, issues: List[ValidationIssue]) -> None:
    if not color.color_name.strip():
        issues.append(ValidationIssue(field=f"{path}.colorName", message="Color name is required"))
    if color.owns_storages:
        if not color.storages:
            issues.append(ValidationIssue(
                field=f"{path}.storages",
                message="At least one storage is required when the color does not use default storages",
            ))
        for index, storage in enumerate(_ordered(color.storages)):
            _validate_storage(storage, f"{path}.storages[{index}]", issues)


def _validate_axes(product: ProductForm, label: str, issues: List[ValidationIssue]) -> None:
    axes = _ordered(product.axes)
    if axes and sum(1 for axis in axes if axis.is_default) != 1:
        issues.append(ValidationIssue(field=label, message=f"Exactly one {label[:-1]} must be marked as default"))
    for axis_index, axis in enumerate(axes):
        path = f"{label}[{axis_index}]"
        if not axis.name.strip():
            issues.append(ValidationIssue(field=f"{path}.name", message="Name is required"))
        if axis.uses_default_storages:
            for index, storage in enumerate(_ordered(axis.default_storages)):
                _validate_storage(storage, f"{path}.defaultStorages[{index}]", issues)
        for color_index, color in enumerate(_ordered(axis.colors)):
            _validate_axis_color(color, f"{path}.colors[{color_index}]", issues)


def validate_product(product: ProductForm) -> List[ValidationIssue]:
    """Lista de problemas por campo; vazia quando o produto pode ser enviado."""
    issues: List[ValidationIssue] = []
    if not product.name.strip():
        issues.append(ValidationIssue(field="name", message="Product name is required"))

    if product.product_type == ProductType.BASIC:
        for index, color in enumerate(_ordered(product.colors)):
            path = f"colors[{index}]"
            if not color.color_name.strip():
                issues.append(ValidationIssue(field=f"{path}.colorName", message="Color name is required"))
            _validate_price_bounds(color, path, issues)
    elif product.product_type == ProductType.NETWORK:
        _validate_axes(product, "networks", issues)
    else:
        _validate_axes(product, "regions", issues)
    return issues


# ═══════════════════════════════════════════════════════════
# CONVERSÃO DE LINHAS
# ═══════════════════════════════════════════════════════════

def _storage_entry(storage: StorageTier, index: int) -> Dict[str, Any]:
    record = pricing_service.reconcile(storage)
    entry = {
        "storageSize": record.storage_size,
        "regularPrice": to_number(record.regular_price),
        "discountPrice": to_number(record.discount_price),
        "discountPercent": to_number(record.discount_percent),
        "stockQuantity": to_int(record.stock_quantity),
        "lowStockAlert": to_int(record.low_stock_alert),
        "displayOrder": index,
    }
    entry.update(_campaign_fields(record))
    return _with_id(storage.id, entry)


def _campaign_fields(record: PriceFields) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if parse_number(record.campaign_price) is not None:
        fields["campaignPrice"] = to_number(record.campaign_price)
    if record.campaign_start:
        fields["campaignStart"] = record.campaign_start
    if record.campaign_end:
        fields["campaignEnd"] = record.campaign_end
    return fields


def _basic_color_entry(color: BasicColor, index: int) -> Dict[str, Any]:
    record = pricing_service.reconcile(color)
    entry: Dict[str, Any] = {"colorName": record.color_name}
    kept = _kept_image(color.color_image, color.pending_image is not None)
    if kept:
        entry["colorImage"] = kept
    for key, value in (
        ("regularPrice", record.regular_price),
        ("discountPrice", record.discount_price),
        ("discountPercent", record.discount_percent),
    ):
        if parse_number(value) is not None:
            entry[key] = to_number(value)
    if parse_number(record.stock_quantity) is not None:
        entry["stockQuantity"] = to_int(record.stock_quantity)
    if parse_number(record.low_stock_alert) is not None:
        entry["lowStockAlert"] = to_int(record.low_stock_alert)
    entry.update(_campaign_fields(record))
    entry["displayOrder"] = index
    return _with_id(color.id, entry)


def _axis_color_entry(color: AxisColor, index: int, attachments: List[Attachment]) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "colorName": color.color_name,
        "hasStorage": color.has_storage,
        "useDefaultStorages": color.use_default_storages,
        "displayOrder": index,
    }
    kept = _kept_image(color.color_image, color.pending_image is not None)
    if kept:
        entry["colorImage"] = kept
    if color.pending_image is not None:
        position = sum(1 for a in attachments if a.part_name == COLOR_PART)
        attachments.append(Attachment(part_name=COLOR_PART, owner=color.id.key, file=color.pending_image))
        entry["colorImageIndex"] = position

    if not color.has_storage:
        entry["singlePrice"] = to_number(color.single_price)
        entry["singleComparePrice"] = to_number(color.single_compare_price)
        entry["singleStockQuantity"] = to_int(color.single_stock_quantity)
    elif not color.use_default_storages:
        entry["storages"] = [
            _storage_entry(storage, i) for i, storage in enumerate(_ordered(color.storages))
        ]
    return _with_id(color.id, entry)


def _axis_entry(axis: VariantAxis, index: int, attachments: List[Attachment]) -> Dict[str, Any]:
    if isinstance(axis, NetworkAxis):
        entry: Dict[str, Any] = {
            "networkName": axis.name,
            "isDefault": axis.is_default,
            "hasDefaultStorages": axis.has_default_storages,
            "displayOrder": index,
        }
    else:
        entry = {"regionName": axis.name, "isDefault": axis.is_default, "displayOrder": index}
    if axis.uses_default_storages:
        entry["defaultStorages"] = [
            _storage_entry(storage, i) for i, storage in enumerate(_ordered(axis.default_storages))
        ]
    entry["colors"] = [
        _axis_color_entry(color, i, attachments) for i, color in enumerate(_ordered(axis.colors))
    ]
    return _with_id(axis.id, entry)


# ═══════════════════════════════════════════════════════════
# CAMPOS DE TOPO
# ═══════════════════════════════════════════════════════════

def _top_level(product: ProductForm) -> Dict[str, Any]:
    document: Dict[str, Any] = {"productType": product.product_type.value}

    for key, value in (
        ("name", product.name),
        ("slug", product.slug),
        ("description", product.description),
        ("shortDescription", product.short_description),
        ("productCode", product.product_code),
        ("sku", product.sku),
        ("warranty", product.warranty),
        ("seoTitle", product.seo.title),
        ("seoDescription", product.seo.description),
        ("seoCanonical", product.seo.canonical_url),
    ):
        if value:
            document[key] = value

    if product.category_ids:
        document["categoryIds"] = list(product.category_ids)
    if product.brand_ids:
        document["brandIds"] = list(product.brand_ids)

    document.update({
        "isActive": product.is_active,
        "isOnline": product.is_online,
        "isPos": product.is_pos,
        "isPreOrder": product.is_pre_order,
        "isOfficial": product.is_official,
        "freeShipping": product.free_shipping,
        "isEmi": product.is_emi,
    })

    if parse_number(product.reward_points) is not None:
        document["rewardPoints"] = to_number(product.reward_points)
    if parse_number(product.min_booking_price) is not None:
        document["minBookingPrice"] = to_number(product.min_booking_price)

    keywords = split_csv(product.seo.keywords)
    if keywords:
        document["seoKeywords"] = keywords
    tags = split_csv(product.tags)
    if tags:
        document["tags"] = tags

    document["videos"] = [
        _with_id(video.id, {"videoUrl": video.url, "videoType": video.type, "displayOrder": i})
        for i, video in enumerate(v for v in product.videos if v.url)
    ]
    document["specifications"] = [
        _with_id(spec.id, {"specKey": spec.key, "specValue": spec.value, "displayOrder": i})
        for i, spec in enumerate(s for s in product.specifications if s.key and s.value)
    ]
    return document


def _media(product: ProductForm, document: Dict[str, Any], attachments: List[Attachment]) -> None:
    kept_images = []
    thumbnail = product.thumbnail
    if thumbnail.pending_file is not None:
        attachments.append(Attachment(part_name=THUMBNAIL_PART, owner=THUMBNAIL_PART, file=thumbnail.pending_file))
    elif _kept_image(thumbnail.url, False):
        kept_images.append({"imageUrl": thumbnail.url, "isThumbnail": True})

    for index, image in enumerate(product.gallery):
        if image.pending_file is not None:
            attachments.append(Attachment(
                part_name=GALLERY_PART, owner=f"{GALLERY_PART}[{index}]", file=image.pending_file,
            ))
        elif _kept_image(image.url, False):
            kept_images.append(_with_id(image.id, {
                "imageUrl": image.url, "altText": image.alt_text, "isThumbnail": False,
            }))
    document["existingImages"] = kept_images


# ═══════════════════════════════════════════════════════════
# PONTO DE ENTRADA
# ═══════════════════════════════════════════════════════════

def serialize_product(product: ProductForm) -> SubmissionPayload:
    """
    Valida e serializa. Lança PayloadValidationError antes de qualquer
    chamada de rede quando o produto é inválido.
    """
    issues = validate_product(product)
    if issues:
        logger.warning(f"⚠️ Produto {product.product_id or '(novo)'} com {len(issues)} erro(s) de validação")
        raise PayloadValidationError(issues)

    attachments: List[Attachment] = []
    document = _top_level(product)
    _media(product, document, attachments)

    if product.product_type == ProductType.BASIC:
        colors = _ordered(product.colors)
        document["colors"] = [_basic_color_entry(color, i) for i, color in enumerate(colors)]
        for index, color in enumerate(colors):
            if color.pending_image is not None:
                attachments.append(Attachment(
                    part_name=f"colors[{index}][colorImage]", owner=color.id.key, file=color.pending_image,
                ))
    elif product.product_type == ProductType.NETWORK:
        document["networks"] = [
            _axis_entry(axis, i, attachments) for i, axis in enumerate(_ordered(product.networks))
        ]
    else:
        document["regions"] = [
            _axis_entry(axis, i, attachments) for i, axis in enumerate(_ordered(product.regions))
        ]

    return SubmissionPayload(
        product_type=product.product_type,
        document=document,
        attachments=attachments,
    )


def to_form_fields(payload: SubmissionPayload) -> Dict[str, str]:
    """
    Campos de texto do multipart: um campo por chave de topo; objetos e
    listas vão como JSON, booleanos como "true"/"false".
    """
    fields: Dict[str, str] = {}
    for key, value in payload.document.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            fields[key] = json.dumps(value, ensure_ascii=False)
        elif isinstance(value, bool):
            fields[key] = "true" if value else "false"
        else:
            fields[key] = str(value)
    return fields
