from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from storefront.api.schemas.products.axis import NetworkAxis, RegionAxis, VariantAxis
from storefront.api.schemas.products.color import AxisColor, BasicColor
from storefront.api.schemas.products.media import GalleryImage, ThumbnailImage
from storefront.api.schemas.shared.base import AppBaseModel
from storefront.core.helpers.identity import EntityId, SPEC_PREFIX, VIDEO_PREFIX
from storefront.core.utils.enums import ProductType, VideoType


class SeoBlock(AppBaseModel):
    title: str = ""
    description: str = ""
    keywords: str = ""  # texto separado por vírgulas, como no input
    canonical_url: str = ""


class SpecificationRow(AppBaseModel):
    id: EntityId = Field(default_factory=lambda: EntityId.new(SPEC_PREFIX))
    key: str = ""
    value: str = ""


class VideoRow(AppBaseModel):
    id: EntityId = Field(default_factory=lambda: EntityId.new(VIDEO_PREFIX))
    url: str = ""
    type: str = VideoType.YOUTUBE.value


# --- VARIANTES: UNIÃO ETIQUETADA PELO FORMATO DO PRODUTO ---

class BasicVariants(AppBaseModel):
    kind: Literal["basic"] = "basic"
    colors: List[BasicColor] = Field(default_factory=list)


class NetworkVariants(AppBaseModel):
    kind: Literal["network"] = "network"
    networks: List[NetworkAxis] = Field(default_factory=list)


class RegionVariants(AppBaseModel):
    kind: Literal["region"] = "region"
    regions: List[RegionAxis] = Field(default_factory=list)


ProductVariants = Annotated[
    Union[BasicVariants, NetworkVariants, RegionVariants],
    Field(discriminator="kind"),
]


class ProductForm(AppBaseModel):
    """
    Árvore editável de um produto do catálogo.

    O formato (basic/network/region) fica fixo em `variants` durante toda a
    sessão de edição. Os acessores `colors`, `networks` e `regions` devolvem
    lista vazia quando não correspondem ao formato.
    """
    product_id: Optional[str] = None

    name: str = ""
    slug: str = ""
    slug_locked: bool = False
    sku: str = ""
    product_code: str = ""
    description: str = ""
    short_description: str = ""
    warranty: str = ""

    category_ids: List[str] = Field(default_factory=list)
    brand_ids: List[str] = Field(default_factory=list)

    is_active: bool = True
    is_online: bool = True
    is_pos: bool = True
    is_pre_order: bool = False
    is_official: bool = False
    free_shipping: bool = False
    is_emi: bool = False

    reward_points: str = ""
    min_booking_price: str = ""

    seo: SeoBlock = Field(default_factory=SeoBlock)
    tags: str = ""

    specifications: List[SpecificationRow] = Field(default_factory=list)
    videos: List[VideoRow] = Field(default_factory=list)

    thumbnail: ThumbnailImage = Field(default_factory=ThumbnailImage)
    gallery: List[GalleryImage] = Field(default_factory=list)

    variants: ProductVariants = Field(default_factory=BasicVariants, frozen=True)

    @property
    def product_type(self) -> ProductType:
        return ProductType(self.variants.kind)

    @property
    def colors(self) -> List[BasicColor]:
        if isinstance(self.variants, BasicVariants):
            return self.variants.colors
        return []

    @property
    def networks(self) -> List[NetworkAxis]:
        if isinstance(self.variants, NetworkVariants):
            return self.variants.networks
        return []

    @property
    def regions(self) -> List[RegionAxis]:
        if isinstance(self.variants, RegionVariants):
            return self.variants.regions
        return []

    @property
    def axes(self) -> List[VariantAxis]:
        """Redes ou regiões, conforme o formato; vazio para produto básico."""
        if isinstance(self.variants, NetworkVariants):
            return self.variants.networks
        if isinstance(self.variants, RegionVariants):
            return self.variants.regions
        return []

    def iter_axis_colors(self):
        for axis in self.axes:
            for color in axis.colors:
                yield axis, color

    def find_axis(self, key: str) -> Optional[VariantAxis]:
        return next((axis for axis in self.axes if axis.id.key == key), None)

    def find_axis_color(self, key: str) -> Optional[AxisColor]:
        return next((color for _, color in self.iter_axis_colors() if color.id.key == key), None)
