# storefront/core/helpers/identity.py
"""
Identidade das linhas editáveis.

Toda linha (rede, região, cor, armazenamento, especificação, vídeo) carrega
um `EntityId` com dois casos explícitos:

- novo: chave local gerada no cliente ("<prefixo>-<timestamp>-<aleatório>"),
  que nunca é enviada ao backend;
- persistido: id durável vindo do backend, enviado para atualização in-place.
"""

import random
import time
from typing import Optional

from pydantic import BaseModel, ConfigDict

NETWORK_PREFIX = "network"
REGION_PREFIX = "region"
COLOR_PREFIX = "color"
DEFAULT_STORAGE_PREFIX = "ds"
STORAGE_PREFIX = "s"
VIDEO_PREFIX = "video"
SPEC_PREFIX = "spec"

PLACEHOLDER_PREFIXES = (
    NETWORK_PREFIX,
    REGION_PREFIX,
    COLOR_PREFIX,
    DEFAULT_STORAGE_PREFIX,
    STORAGE_PREFIX,
    VIDEO_PREFIX,
    SPEC_PREFIX,
)


def generate_placeholder(prefix: str) -> str:
    timestamp = int(time.time() * 1000)
    suffix = random.randint(0, 10**9)
    return f"{prefix}-{timestamp}-{suffix}"


def is_placeholder(value: Optional[str]) -> bool:
    if not value:
        return False
    return any(str(value).startswith(f"{prefix}-") for prefix in PLACEHOLDER_PREFIXES)


class EntityId(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    is_new: bool

    @classmethod
    def new(cls, prefix: str) -> "EntityId":
        return cls(key=generate_placeholder(prefix), is_new=True)

    @classmethod
    def persisted(cls, backend_id) -> "EntityId":
        return cls(key=str(backend_id), is_new=False)

    @classmethod
    def from_backend(cls, raw, prefix: str) -> "EntityId":
        """
        Usa o id do backend quando existir. Ids ausentes, vazios ou que já
        chegam com prefixo de placeholder viram linhas novas.
        """
        if raw is None or raw == "" or is_placeholder(str(raw)):
            return cls.new(prefix)
        return cls.persisted(raw)

    @property
    def wire_id(self) -> Optional[str]:
        """Id a ser enviado ao backend; None para linhas ainda não persistidas."""
        return None if self.is_new else self.key

    def __str__(self) -> str:
        return self.key
