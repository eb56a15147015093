# storefront/core/config.py
"""
Configurações da Aplicação - Storefront Admin
=============================================

Gerencia variáveis de ambiente de forma centralizada e tipada.
"""

from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Carrega .env do diretório raiz
load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent.parent / ".env")


class Config(BaseSettings):
    """Configurações centralizadas da aplicação"""

    # ═══════════════════════════════════════════════════════════
    # 🌍 AMBIENTE
    # ═══════════════════════════════════════════════════════════

    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ═══════════════════════════════════════════════════════════
    # 🛒 API DO CATÁLOGO (BACKEND REST)
    # ═══════════════════════════════════════════════════════════

    CATALOG_API_URL: str = "http://localhost:4000/api"
    CATALOG_API_TOKEN: Optional[str] = None
    CATALOG_API_TIMEOUT: float = 30.0

    # ═══════════════════════════════════════════════════════════
    # 💰 PREÇOS E ESTOQUE
    # ═══════════════════════════════════════════════════════════

    DEFAULT_LOW_STOCK_ALERT: int = 5
    PRICE_TOLERANCE: int = 1

    # ═══════════════════════════════════════════════════════════
    # 📎 UPLOADS
    # ═══════════════════════════════════════════════════════════

    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # ═══════════════════════════════════════════════════════════
    # ✏️ SESSÕES DE EDIÇÃO
    # ═══════════════════════════════════════════════════════════

    EDIT_SESSION_TTL_MINUTES: int = 60

    # ═══════════════════════════════════════════════════════════
    # 🔧 PROPRIEDADES ÚTEIS
    # ═══════════════════════════════════════════════════════════

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_test(self) -> bool:
        return self.ENVIRONMENT.lower() == "test"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# ✅ Instância global
config = Config()


def validate_config(settings: Config = config):
    """Valida configurações críticas"""
    errors = []

    if not settings.CATALOG_API_URL.startswith(("http://", "https://")):
        errors.append("CATALOG_API_URL deve começar com http:// ou https://")

    if settings.CATALOG_API_TIMEOUT <= 0:
        errors.append("CATALOG_API_TIMEOUT deve ser positivo")

    if settings.DEFAULT_LOW_STOCK_ALERT < 0:
        errors.append("DEFAULT_LOW_STOCK_ALERT não pode ser negativo")

    if settings.PRICE_TOLERANCE < 0:
        errors.append("PRICE_TOLERANCE não pode ser negativo")

    if settings.EDIT_SESSION_TTL_MINUTES <= 0:
        errors.append("EDIT_SESSION_TTL_MINUTES deve ser positivo")

    if settings.ENVIRONMENT not in ["development", "test", "production"]:
        errors.append("ENVIRONMENT deve ser: development, test ou production")

    if errors:
        raise ValueError(
            "❌ Erros de configuração:\n" + "\n".join(f"  • {e}" for e in errors)
        )


validate_config()
