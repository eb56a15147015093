from typing import Optional

from pydantic import Field, PrivateAttr

from storefront.api.schemas.shared.base import AppBaseModel
from storefront.core.config import config
from storefront.core.helpers.identity import EntityId, STORAGE_PREFIX
from storefront.core.utils.enums import PriceSource

# Campos do trio de preço; editar qualquer um deles reconcilia o desconto.
PRICE_TRIAD_FIELDS = ("regular_price", "discount_price", "discount_percent")


class PriceFields(AppBaseModel):
    """
    Registro de preço editável. Todos os valores são texto ("" = vazio),
    exatamente como ficam nos inputs do formulário.
    """
    regular_price: str = ""
    discount_price: str = ""
    discount_percent: str = ""
    stock_quantity: str = ""
    campaign_price: str = ""
    campaign_start: str = ""
    campaign_end: str = ""
    low_stock_alert: str = Field(default_factory=lambda: str(config.DEFAULT_LOW_STOCK_ALERT))

    _price_source: Optional[PriceSource] = PrivateAttr(default=None)

    @property
    def price_source(self) -> Optional[PriceSource]:
        return self._price_source


class StorageTier(PriceFields):
    """Opção de capacidade ("128GB") com seu próprio preço."""
    id: EntityId = Field(default_factory=lambda: EntityId.new(STORAGE_PREFIX))
    storage_size: str = ""
    display_order: int = 0
