# storefront/api/services/variant_editor_service.py
"""
Operações de edição da árvore de variantes.

Todas são síncronas e locais (nenhuma chamada ao backend). Operações sobre
um id que não existe mais são no-op: retornam None/False e registram um
aviso, nunca lançam exceção.
"""

import logging
from typing import List, Optional, Tuple, Union

from storefront.api.schemas.products.axis import NetworkAxis, RegionAxis, VariantAxis
from storefront.api.schemas.products.color import AxisColor, BasicColor
from storefront.api.schemas.products.media import GalleryImage, PendingFile, ThumbnailImage
from storefront.api.schemas.products.price import PRICE_TRIAD_FIELDS, StorageTier
from storefront.api.schemas.products.product import ProductForm, SpecificationRow, VideoRow
from storefront.api.services import pricing_service
from storefront.core.helpers.formatting import slugify, to_data_uri, to_form_str
from storefront.core.helpers.identity import DEFAULT_STORAGE_PREFIX, EntityId, STORAGE_PREFIX
from storefront.core.utils.enums import ProductType

logger = logging.getLogger(__name__)

AnyColor = Union[BasicColor, AxisColor]

# Campos que o editor pode alterar diretamente em cada tipo de linha
PRICE_RECORD_FIELDS = PRICE_TRIAD_FIELDS + (
    "stock_quantity", "campaign_price", "campaign_start", "campaign_end", "low_stock_alert",
)
STORAGE_FIELDS = ("storage_size",) + PRICE_RECORD_FIELDS
BASIC_COLOR_FIELDS = ("color_name", "color_image") + PRICE_RECORD_FIELDS
AXIS_COLOR_FIELDS = (
    "color_name", "color_image", "has_storage", "use_default_storages",
    "single_price", "single_compare_price", "single_stock_quantity",
)
NETWORK_FIELDS = ("name", "is_default", "has_default_storages")
REGION_FIELDS = ("name", "is_default")
SPEC_FIELDS = ("key", "value")
VIDEO_FIELDS = ("url", "type")
PRODUCT_FIELDS = (
    "name", "slug", "sku", "product_code", "description", "short_description", "warranty",
    "is_active", "is_online", "is_pos", "is_pre_order", "is_official", "free_shipping", "is_emi",
    "reward_points", "min_booking_price", "tags",
)
SEO_FIELDS = ("title", "description", "keywords", "canonical_url")
NUMERIC_TEXT_FIELDS = PRICE_RECORD_FIELDS + (
    "single_price", "single_compare_price", "single_stock_quantity",
    "reward_points", "min_booking_price",
)


def _coerce(model, field: str, value):
    """Converte o valor vindo da UI para o tipo do campo."""
    annotation = type(model).model_fields[field].annotation
    if annotation is bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "on")
        return bool(value)
    if value is None:
        return ""
    if field in NUMERIC_TEXT_FIELDS:
        return to_form_str(value)
    return value if isinstance(value, str) else to_form_str(value)


def _renumber(items: list) -> None:
    for index, item in enumerate(items):
        item.display_order = index


class VariantEditorService:
    """Edita uma árvore `ProductForm` aberta em uma sessão."""

    def __init__(self, product: ProductForm):
        self.product = product

    @property
    def product_type(self) -> ProductType:
        return self.product.product_type

    # ═══════════════════════════════════════════════════════════
    # BUSCAS
    # ═══════════════════════════════════════════════════════════

    def find_color(self, key: str) -> Optional[AnyColor]:
        for color in self.product.colors:
            if color.id.key == key:
                return color
        return self.product.find_axis_color(key)

    def find_storage(self, key: str) -> Optional[Tuple[list, StorageTier]]:
        """Retorna (lista dona, armazenamento), padrão do eixo ou próprio da cor."""
        for axis in self.product.axes:
            for storage in axis.default_storages:
                if storage.id.key == key:
                    return axis.default_storages, storage
            for color in axis.colors:
                for storage in color.storages:
                    if storage.id.key == key:
                        return color.storages, storage
        return None

    def _color_siblings(self, key: str) -> Optional[list]:
        if any(c.id.key == key for c in self.product.colors):
            return self.product.colors
        for axis in self.product.axes:
            if any(c.id.key == key for c in axis.colors):
                return axis.colors
        return None

    def _stale(self, kind: str, key: str):
        logger.warning(f"⚠️ {kind} '{key}' não encontrado na sessão. Operação ignorada.")

    def _set_field(self, model, field: str, value, allowed) -> bool:
        name = type(model).resolve_field(field)
        if name is None or name not in allowed:
            logger.warning(f"⚠️ Campo '{field}' não editável em {type(model).__name__}. Ignorado.")
            return False
        if name in PRICE_TRIAD_FIELDS:
            pricing_service.apply_price_edit(model, name, value)
        else:
            setattr(model, name, _coerce(model, name, value))
        return True

    # ═══════════════════════════════════════════════════════════
    # EIXOS (REDE / REGIÃO)
    # ═══════════════════════════════════════════════════════════

    def add_axis(self) -> Optional[VariantAxis]:
        if self.product_type == ProductType.NETWORK:
            axis = NetworkAxis()
        elif self.product_type == ProductType.REGION:
            axis = RegionAxis()
        else:
            logger.warning("⚠️ Produto básico não possui redes/regiões. add_axis ignorado.")
            return None
        axes = self.product.axes
        axis.is_default = not any(a.is_default for a in axes)
        axes.append(axis)
        _renumber(axes)
        return axis

    def remove_axis(self, key: str) -> bool:
        axes = self.product.axes
        axis = self.product.find_axis(key)
        if axis is None:
            self._stale("Eixo", key)
            return False
        axes.remove(axis)
        _renumber(axes)
        if axis.is_default and axes:
            axes[0].is_default = True
        return True

    def set_default_axis(self, key: str) -> bool:
        target = self.product.find_axis(key)
        if target is None:
            self._stale("Eixo", key)
            return False
        for axis in self.product.axes:
            axis.is_default = axis is target
        return True

    def update_axis(self, key: str, field: str, value) -> bool:
        axis = self.product.find_axis(key)
        if axis is None:
            self._stale("Eixo", key)
            return False
        allowed = NETWORK_FIELDS if isinstance(axis, NetworkAxis) else REGION_FIELDS
        if type(axis).resolve_field(field) == "is_default":
            if _coerce(axis, "is_default", value):
                return self.set_default_axis(key)
            axis.is_default = False
            return True
        return self._set_field(axis, field, value, allowed)

    # ═══════════════════════════════════════════════════════════
    # ARMAZENAMENTOS PADRÃO DO EIXO
    # ═══════════════════════════════════════════════════════════

    def add_default_storage(self, axis_key: str) -> Optional[StorageTier]:
        axis = self.product.find_axis(axis_key)
        if axis is None:
            self._stale("Eixo", axis_key)
            return None
        storage = StorageTier(id=EntityId.new(DEFAULT_STORAGE_PREFIX))
        axis.default_storages.append(storage)
        _renumber(axis.default_storages)
        return storage

    # ═══════════════════════════════════════════════════════════
    # CORES
    # ═══════════════════════════════════════════════════════════

    def add_color(self, axis_key: Optional[str] = None) -> Optional[AnyColor]:
        if self.product_type == ProductType.BASIC:
            color = BasicColor()
            self.product.colors.append(color)
            _renumber(self.product.colors)
            return color
        axis = self.product.find_axis(axis_key) if axis_key else None
        if axis is None:
            self._stale("Eixo", str(axis_key))
            return None
        color = AxisColor()
        axis.colors.append(color)
        _renumber(axis.colors)
        return color

    def remove_color(self, key: str) -> bool:
        siblings = self._color_siblings(key)
        if siblings is None:
            self._stale("Cor", key)
            return False
        siblings[:] = [c for c in siblings if c.id.key != key]
        _renumber(siblings)
        return True

    def update_color(self, key: str, field: str, value) -> bool:
        color = self.find_color(key)
        if color is None:
            self._stale("Cor", key)
            return False
        allowed = BASIC_COLOR_FIELDS if isinstance(color, BasicColor) else AXIS_COLOR_FIELDS
        return self._set_field(color, field, value, allowed)

    def attach_color_image(self, key: str, file: PendingFile) -> bool:
        """Guarda o arquivo e gera a pré-visualização local; substitui o anterior."""
        color = self.find_color(key)
        if color is None:
            self._stale("Cor", key)
            return False
        color.color_image = to_data_uri(file.content, file.content_type)
        color._pending_image = file
        return True

    def remove_color_image(self, key: str) -> bool:
        color = self.find_color(key)
        if color is None:
            self._stale("Cor", key)
            return False
        color.color_image = ""
        color._pending_image = None
        return True

    # ═══════════════════════════════════════════════════════════
    # ARMAZENAMENTOS PRÓPRIOS DA COR
    # ═══════════════════════════════════════════════════════════

    def add_storage(self, color_key: str) -> Optional[StorageTier]:
        color = self.product.find_axis_color(color_key)
        if color is None:
            self._stale("Cor", color_key)
            return None
        storage = StorageTier(id=EntityId.new(STORAGE_PREFIX))
        color.storages.append(storage)
        _renumber(color.storages)
        return storage

    def remove_storage(self, key: str) -> bool:
        """
        Remove um armazenamento (padrão ou próprio). Uma cor que fica sem
        armazenamentos não é ajustada aqui.
        """
        found = self.find_storage(key)
        if found is None:
            self._stale("Armazenamento", key)
            return False
        owner, storage = found
        owner.remove(storage)
        _renumber(owner)
        return True

    def update_storage(self, key: str, field: str, value) -> bool:
        found = self.find_storage(key)
        if found is None:
            self._stale("Armazenamento", key)
            return False
        return self._set_field(found[1], field, value, STORAGE_FIELDS)

    # ═══════════════════════════════════════════════════════════
    # REORDENAÇÃO
    # ═══════════════════════════════════════════════════════════

    def move(self, key: str, new_index: int) -> bool:
        """Move eixo, cor ou armazenamento entre os irmãos e renumera todos."""
        siblings = self._siblings_of(key)
        if siblings is None:
            self._stale("Item", key)
            return False
        item = next(i for i in siblings if i.id.key == key)
        siblings.remove(item)
        new_index = max(0, min(int(new_index), len(siblings)))
        siblings.insert(new_index, item)
        _renumber(siblings)
        return True

    def _siblings_of(self, key: str) -> Optional[list]:
        if self.product.find_axis(key) is not None:
            return self.product.axes
        siblings = self._color_siblings(key)
        if siblings is not None:
            return siblings
        found = self.find_storage(key)
        return found[0] if found else None

    # ═══════════════════════════════════════════════════════════
    # CAMPOS DO PRODUTO
    # ═══════════════════════════════════════════════════════════

    def set_name(self, name: str) -> None:
        self.product.name = name or ""
        if not self.product.slug_locked:
            self.product.slug = slugify(self.product.name)

    def set_slug(self, slug: str) -> None:
        """Slug digitado trava a derivação automática; slug vazio destrava."""
        self.product.slug = slug or ""
        self.product.slug_locked = bool(self.product.slug)

    def update_product(self, field: str, value) -> bool:
        name = ProductForm.resolve_field(field)
        if name == "name":
            self.set_name(_coerce(self.product, "name", value))
            return True
        if name == "slug":
            self.set_slug(_coerce(self.product, "slug", value))
            return True
        return self._set_field(self.product, field, value, PRODUCT_FIELDS)

    def update_seo(self, field: str, value) -> bool:
        return self._set_field(self.product.seo, field, value, SEO_FIELDS)

    def toggle_category(self, category_id: str) -> None:
        ids = self.product.category_ids
        if category_id in ids:
            ids.remove(category_id)
        else:
            ids.append(category_id)

    def toggle_brand(self, brand_id: str) -> None:
        ids = self.product.brand_ids
        if brand_id in ids:
            ids.remove(brand_id)
        else:
            ids.append(brand_id)

    # --- Especificações e vídeos ---

    def add_specification(self) -> SpecificationRow:
        row = SpecificationRow()
        self.product.specifications.append(row)
        return row

    def add_video(self) -> VideoRow:
        row = VideoRow()
        self.product.videos.append(row)
        return row

    def _row_list(self, key: str) -> Optional[List]:
        for rows in (self.product.specifications, self.product.videos):
            if any(r.id.key == key for r in rows):
                return rows
        return None

    def remove_row(self, key: str) -> bool:
        rows = self._row_list(key)
        if rows is None:
            self._stale("Linha", key)
            return False
        rows[:] = [r for r in rows if r.id.key != key]
        return True

    def update_row(self, key: str, field: str, value) -> bool:
        rows = self._row_list(key)
        if rows is None:
            self._stale("Linha", key)
            return False
        row = next(r for r in rows if r.id.key == key)
        allowed = SPEC_FIELDS if isinstance(row, SpecificationRow) else VIDEO_FIELDS
        return self._set_field(row, field, value, allowed)

    # --- Miniatura e galeria ---

    def attach_thumbnail(self, file: PendingFile) -> None:
        thumbnail = ThumbnailImage(url=to_data_uri(file.content, file.content_type))
        thumbnail._pending_file = file
        self.product.thumbnail = thumbnail

    def remove_thumbnail(self) -> None:
        self.product.thumbnail = ThumbnailImage()

    def attach_gallery_image(self, file: PendingFile, alt_text: str = "") -> GalleryImage:
        image = GalleryImage(url=to_data_uri(file.content, file.content_type), alt_text=alt_text or "")
        image._pending_file = file
        self.product.gallery.append(image)
        return image

    def remove_gallery_image(self, index: int) -> bool:
        if not 0 <= index < len(self.product.gallery):
            logger.warning(f"⚠️ Imagem de galeria na posição {index} não existe. Ignorado.")
            return False
        del self.product.gallery[index]
        return True
