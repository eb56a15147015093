from typing import Any, Dict, List

from pydantic import Field

from storefront.api.schemas.products.media import PendingFile
from storefront.api.schemas.shared.base import AppBaseModel
from storefront.core.utils.enums import ProductType


class ValidationIssue(AppBaseModel):
    field: str
    message: str


class Attachment(AppBaseModel):
    """
    Parte binária do multipart. `owner` é a chave local da linha dona do
    arquivo (cor, galeria ou miniatura); `part_name` é o nome do campo no form.
    """
    part_name: str
    owner: str
    file: PendingFile


class SubmissionPayload(AppBaseModel):
    product_type: ProductType
    document: Dict[str, Any] = Field(default_factory=dict)
    attachments: List[Attachment] = Field(default_factory=list)

    def attachment_for(self, owner: str):
        return next((a for a in self.attachments if a.owner == owner), None)
