from typing import List, Optional

from pydantic import Field, PrivateAttr

from storefront.api.schemas.products.media import PendingFile
from storefront.api.schemas.products.price import PriceFields, StorageTier
from storefront.api.schemas.shared.base import AppBaseModel
from storefront.core.helpers.identity import EntityId, COLOR_PREFIX


class _ColorImageMixin(AppBaseModel):
    color_image: str = ""
    _pending_image: Optional[PendingFile] = PrivateAttr(default=None)

    @property
    def pending_image(self) -> Optional[PendingFile]:
        return self._pending_image


class BasicColor(PriceFields, _ColorImageMixin):
    """Cor de produto básico: sempre com preço direto, sem armazenamentos."""
    id: EntityId = Field(default_factory=lambda: EntityId.new(COLOR_PREFIX))
    color_name: str = ""
    display_order: int = 0


class AxisColor(_ColorImageMixin):
    """
    Cor dentro de uma rede/região.

    - has_storage=False: preço direto (single_*), sem armazenamentos
    - has_storage=True, use_default_storages=True: herda os armazenamentos
      padrão do eixo (casados por storage_size)
    - has_storage=True, use_default_storages=False: armazenamentos próprios
    """
    id: EntityId = Field(default_factory=lambda: EntityId.new(COLOR_PREFIX))
    color_name: str = ""
    display_order: int = 0
    has_storage: bool = True
    use_default_storages: bool = True
    single_price: str = ""
    single_compare_price: str = ""
    single_stock_quantity: str = ""
    storages: List[StorageTier] = Field(default_factory=list)

    @property
    def owns_storages(self) -> bool:
        return self.has_storage and not self.use_default_storages
