from typing import List, Optional

from pydantic import Field

from storefront.api.schemas.shared.base import AppBaseModel
from storefront.core.utils.enums import ListStatus, ProductType


class DefaultPrice(AppBaseModel):
    regular_price: float = 0
    discount_price: float = 0
    has_discount: bool = False
    discount: int = 0
    stock_quantity: int = 0


class ProductSummary(AppBaseModel):
    """Linha da tabela de produtos do admin (somente leitura)."""
    id: Optional[str] = None
    name: str = ""
    image: str = "/placeholder.svg"
    sku: str = ""
    product_code: str = ""
    slug: str = ""
    category_ids: List[str] = Field(default_factory=list)
    category: str = "Uncategorized"
    price: float = 0
    stock: int = 0
    status: ListStatus = ListStatus.INACTIVE
    description: str = ""
    type: ProductType = ProductType.BASIC
