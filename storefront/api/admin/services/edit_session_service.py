# storefront/api/admin/services/edit_session_service.py
"""
Sessões de edição de produto mantidas em memória.

Ciclo: abrir (busca + hidratação) -> editar (VariantEditorService) ->
enviar (validação + serialização + PATCH) ou cancelar. Arquivos pendentes
vivem só na sessão e são liberados quando ela fecha. Sessões sem uso por
mais de EDIT_SESSION_TTL_MINUTES expiram e são descartadas na próxima
abertura ou consulta.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from storefront.api.clients.catalog_client import CatalogClient, CatalogClientError
from storefront.api.schemas.products.payload import SubmissionPayload, ValidationIssue
from storefront.api.schemas.products.product import ProductForm
from storefront.api.services.hydration_service import hydrate_product
from storefront.api.services.payload_serializer import PayloadValidationError, serialize_product
from storefront.api.services.variant_editor_service import VariantEditorService
from storefront.core.config import config

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    pass


@dataclass
class EditSession:
    session_id: str
    product: ProductForm
    editor: VariantEditorService
    opened_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_seen_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def product_id(self) -> Optional[str]:
        return self.product.product_id


class EditSessionService:
    def __init__(self, client: Optional[CatalogClient] = None, ttl_minutes: Optional[int] = None):
        self.client = client or CatalogClient()
        self.ttl = timedelta(minutes=ttl_minutes or config.EDIT_SESSION_TTL_MINUTES)
        self._sessions: Dict[str, EditSession] = {}

    @property
    def open_count(self) -> int:
        return len(self._sessions)

    # ═══════════════════════════════════════════════════════════
    # CICLO DE VIDA
    # ═══════════════════════════════════════════════════════════

    async def open(self, product_id: str) -> EditSession:
        """Busca o produto no backend e abre uma sessão com a árvore hidratada."""
        document = await self.client.get_product(product_id)
        if isinstance(document, dict) and not document.get("id"):
            document = {**document, "id": product_id}
        return self.open_from_document(document)

    def open_from_document(self, document: Dict[str, Any]) -> EditSession:
        self.expire_idle()
        product = hydrate_product(document)
        session = EditSession(
            session_id=str(uuid.uuid4()),
            product=product,
            editor=VariantEditorService(product),
        )
        self._sessions[session.session_id] = session
        logger.info(
            f"✏️ Sessão {session.session_id} aberta para o produto "
            f"{session.product_id} ({product.product_type.value})"
        )
        return session

    def get(self, session_id: str) -> EditSession:
        self.expire_idle()
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        session.last_seen_at = datetime.now(timezone.utc)
        return session

    def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        logger.info(f"🗑️ Sessão {session_id} encerrada")
        return True

    def close_all(self) -> int:
        count = len(self._sessions)
        self._sessions.clear()
        return count

    def expire_idle(self, now: Optional[datetime] = None) -> int:
        """Descarta sessões sem uso há mais que o TTL, junto com os arquivos pendentes."""
        now = now or datetime.now(timezone.utc)
        expired = [sid for sid, s in self._sessions.items() if now - s.last_seen_at > self.ttl]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info(f"⏰ {len(expired)} sessão(ões) de edição expirada(s)")
        return len(expired)

    # ═══════════════════════════════════════════════════════════
    # ENVIO
    # ═══════════════════════════════════════════════════════════

    def preview(self, session_id: str) -> SubmissionPayload:
        return serialize_product(self.get(session_id).product)

    async def submit(self, session_id: str) -> Dict[str, Any]:
        """
        Valida, serializa e envia. Em caso de erro (validação ou transporte)
        a sessão continua aberta e a árvore intacta para nova tentativa.
        """
        session = self.get(session_id)
        if not session.product_id:
            raise PayloadValidationError([
                ValidationIssue(field="id", message="Product id is required to submit an update"),
            ])

        payload = serialize_product(session.product)
        try:
            response = await self.client.update_product(session.product_id, payload)
        except CatalogClientError:
            logger.error(f"❌ Envio da sessão {session_id} falhou; sessão mantida aberta")
            raise

        logger.info(f"✅ Produto {session.product_id} atualizado pela sessão {session_id}")
        self.close(session_id)
        return response


# Singleton
edit_session_service = EditSessionService()


def get_edit_session_service() -> EditSessionService:
    return edit_session_service
