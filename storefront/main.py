# storefront/main.py
"""
Aplicação Principal - Storefront Admin
======================================

Editor de produtos do catálogo: sessões de edição de variantes
(básico / rede / região) e envio multipart para o backend REST.
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from storefront.api.admin import router as admin_router
from storefront.api.admin.services.edit_session_service import edit_session_service
from storefront.core.config import config

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gerencia ciclo de vida da aplicação"""

    logger.info("=" * 60)
    logger.info("🚀 INICIANDO STOREFRONT ADMIN")
    logger.info("=" * 60)
    logger.info(f"   ├─ Ambiente: {config.ENVIRONMENT}")
    logger.info(f"   └─ Backend do catálogo: {config.CATALOG_API_URL}")
    logger.info("✅ APLICAÇÃO PRONTA!")

    yield

    # SHUTDOWN
    discarded = edit_session_service.close_all()
    logger.info(f"🛑 Aplicação desligada ({discarded} sessão(ões) descartada(s))")


# ✅ CRIA APLICAÇÃO
app = FastAPI(
    title="Storefront Admin API",
    version="1.0.0",
    lifespan=lifespan
)

# ═══════════════════════════════════════════════════════════
# CORS
# ═══════════════════════════════════════════════════════════

if config.is_development or config.is_test:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("🟢 MODO DESENVOLVIMENTO: CORS permissivo")

# ═══════════════════════════════════════════════════════════
# ROTAS
# ═══════════════════════════════════════════════════════════

app.include_router(admin_router)


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok", "environment": config.ENVIRONMENT}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)

__all__ = ["app"]
