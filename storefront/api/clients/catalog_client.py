# storefront/api/clients/catalog_client.py
"""
Cliente do backend REST do catálogo.

Busca documentos de produto, envia atualizações multipart por formato
(basic/network/region) e remove produtos. Sem retry: política de
repetição/timeout é responsabilidade da camada HTTP externa.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple

import httpx

from storefront.api.schemas.products.payload import SubmissionPayload
from storefront.api.services.payload_serializer import to_form_fields
from storefront.core.config import config
from storefront.core.utils.enums import ProductType

logger = logging.getLogger(__name__)

PRODUCTS_GET = "/products"
PRODUCTS_GET_ONE = "/products/{id}"
PRODUCTS_DELETE = "/products/{id}"
PRODUCTS_UPDATE = {
    ProductType.BASIC: "/products/basic/{id}",
    ProductType.NETWORK: "/products/network/{id}",
    ProductType.REGION: "/products/region/{id}",
}
LITE_FIELDS = (
    "id,name,sku,productCode,slug,categoryId,categoryIds,price,stockQuantity,"
    "isActive,lowStockAlert,images,productType,totalStock"
)


class CatalogClientError(Exception):
    """Falha de transporte ou resposta de erro do backend (mensagem original)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or body.get("detail")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return response.text or f"HTTP {response.status_code}"


class CatalogClient:
    def __init__(
            self,
            base_url: Optional[str] = None,
            token: Optional[str] = None,
            timeout: Optional[float] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or config.CATALOG_API_URL).rstrip("/")
        self.token = token if token is not None else config.CATALOG_API_TOKEN
        self.timeout = httpx.Timeout(timeout or config.CATALOG_API_TIMEOUT)
        self._transport = transport

    @asynccontextmanager
    async def get_client(self):
        """Context manager para cliente HTTP"""
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
        ) as client:
            yield client

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Any:
        try:
            async with self.get_client() as client:
                response = await client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"🚨 Falha de rede em [{method}] {endpoint}: {e}", exc_info=True)
            raise CatalogClientError(f"Network error: {e}") from e

        logger.info(f"🔗 [{method}] {endpoint} → {response.status_code}")

        if response.is_error:
            message = _error_message(response)
            logger.error(f"❌ Backend recusou [{method}] {endpoint}: {message}")
            raise CatalogClientError(message, response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    # ═══════════════════════════════════════════════════════════
    # LEITURA
    # ═══════════════════════════════════════════════════════════

    async def get_product(self, product_id: str) -> Dict[str, Any]:
        return await self._make_request("GET", PRODUCTS_GET_ONE.format(id=product_id))

    async def list_products(
            self,
            filters: Optional[Dict[str, Any]] = None,
            page: int = 1,
            limit: int = 20,
    ) -> Dict[str, Any]:
        """Listagem leve para a tabela do admin."""
        params = {"offset": (page - 1) * limit, "limit": limit, "fields": LITE_FIELDS}
        params.update({k: v for k, v in (filters or {}).items() if v is not None})
        return await self._make_request("GET", PRODUCTS_GET, params=params)

    # ═══════════════════════════════════════════════════════════
    # ESCRITA
    # ═══════════════════════════════════════════════════════════

    async def update_product(self, product_id: str, payload: SubmissionPayload) -> Dict[str, Any]:
        """Um único PATCH multipart no endpoint do formato do produto."""
        endpoint = PRODUCTS_UPDATE[payload.product_type].format(id=product_id)
        parts: List[Tuple[str, Tuple]] = [
            (key, (None, value.encode("utf-8"))) for key, value in to_form_fields(payload).items()
        ]
        for attachment in payload.attachments:
            parts.append((
                attachment.part_name,
                (
                    attachment.file.filename,
                    attachment.file.content,
                    attachment.file.content_type or "application/octet-stream",
                ),
            ))
        logger.info(
            f"📤 Enviando produto {product_id} ({payload.product_type.value}) "
            f"com {len(payload.attachments)} anexo(s)"
        )
        return await self._make_request("PATCH", endpoint, files=parts)

    async def delete_product(self, product_id: str) -> None:
        await self._make_request("DELETE", PRODUCTS_DELETE.format(id=product_id))
