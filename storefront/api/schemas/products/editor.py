from typing import Any, Dict, List, Optional

from pydantic import Field

from storefront.api.schemas.products.payload import ValidationIssue
from storefront.api.schemas.shared.base import AppBaseModel
from storefront.core.utils.enums import ProductType


class OpenSessionRequest(AppBaseModel):
    product_id: str = Field(..., min_length=1)


class AddItemRequest(AppBaseModel):
    parent_id: Optional[str] = None


class UpdateFieldRequest(AppBaseModel):
    field: str = Field(..., min_length=1)
    value: Any = None


class MoveItemRequest(AppBaseModel):
    new_index: int = Field(..., ge=0)


class SessionOut(AppBaseModel):
    session_id: str
    product_type: ProductType
    applied: bool = True
    item: Optional[Dict[str, Any]] = None
    product: Dict[str, Any]


class PreviewOut(AppBaseModel):
    document: Dict[str, Any]
    attachments: List[Dict[str, Any]] = Field(default_factory=list)


class ValidationErrorOut(AppBaseModel):
    message: str
    issues: List[ValidationIssue]
