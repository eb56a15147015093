from typing import List, Optional

from pydantic import Field

from storefront.api.schemas.products.color import AxisColor
from storefront.api.schemas.products.price import StorageTier
from storefront.api.schemas.shared.base import AppBaseModel
from storefront.core.helpers.identity import EntityId, NETWORK_PREFIX, REGION_PREFIX


class VariantAxis(AppBaseModel):
    """Base comum de rede e região."""
    name: str = ""
    is_default: bool = False
    display_order: int = 0
    default_storages: List[StorageTier] = Field(default_factory=list)
    colors: List[AxisColor] = Field(default_factory=list)

    @property
    def uses_default_storages(self) -> bool:
        return True

    def find_default_storage(self, storage_size: str) -> Optional[StorageTier]:
        """
        Resolve o preço de uma cor que herda os padrões.
        O casamento é por igualdade do rótulo storage_size.
        """
        for storage in self.default_storages:
            if storage.storage_size == storage_size:
                return storage
        return None


class NetworkAxis(VariantAxis):
    id: EntityId = Field(default_factory=lambda: EntityId.new(NETWORK_PREFIX))
    has_default_storages: bool = True

    @property
    def uses_default_storages(self) -> bool:
        return self.has_default_storages


class RegionAxis(VariantAxis):
    id: EntityId = Field(default_factory=lambda: EntityId.new(REGION_PREFIX))
