import enum


class ProductType(str, enum.Enum):
    """
    Formato do produto. Definido uma única vez ao abrir a edição e
    imutável durante a sessão.
    """
    BASIC = "basic"
    NETWORK = "network"
    REGION = "region"

    @classmethod
    def resolve(cls, raw) -> "ProductType":
        """Valor desconhecido ou ausente cai para BASIC."""
        if raw is None:
            return cls.BASIC
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.BASIC


class StockStatus(str, enum.Enum):
    OUT_OF_STOCK = "OutOfStock"
    LOW_STOCK = "LowStock"
    IN_STOCK = "InStock"


class PriceSource(str, enum.Enum):
    """Qual campo do desconto foi editado por último (é o autoritativo)."""
    PRICE = "price"
    PERCENT = "percent"


class VideoType(str, enum.Enum):
    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    DIRECT = "direct"


class EditableKind(str, enum.Enum):
    """Tipos de linha editáveis expostos pelo editor de variantes."""
    NETWORK = "networks"
    REGION = "regions"
    COLOR = "colors"
    DEFAULT_STORAGE = "default-storages"
    STORAGE = "storages"
    SPECIFICATION = "specifications"
    VIDEO = "videos"


class ListStatus(str, enum.Enum):
    INACTIVE = "Inactive"
    ACTIVE = "Active"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"
