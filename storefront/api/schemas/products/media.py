from typing import Optional

from pydantic import Field, PrivateAttr

from storefront.api.schemas.shared.base import AppBaseModel
from storefront.core.helpers.identity import EntityId


class PendingFile(AppBaseModel):
    """Arquivo binário mantido em memória até o envio."""
    filename: str
    content: bytes = Field(repr=False)
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class GalleryImage(AppBaseModel):
    id: Optional[EntityId] = None
    url: str = ""
    alt_text: str = ""
    _pending_file: Optional[PendingFile] = PrivateAttr(default=None)

    @property
    def pending_file(self) -> Optional[PendingFile]:
        return self._pending_file


class ThumbnailImage(AppBaseModel):
    url: str = ""
    _pending_file: Optional[PendingFile] = PrivateAttr(default=None)

    @property
    def pending_file(self) -> Optional[PendingFile]:
        return self._pending_file
