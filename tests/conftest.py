"""
Fixtures compartilhadas
=======================
Documentos de produto no formato do backend (básico, rede e região).
"""

import copy

import pytest

from storefront.api.schemas.products.media import PendingFile
from storefront.api.services.hydration_service import hydrate_product


NETWORK_DOCUMENT = {
    "id": "p-100",
    "productType": "network",
    "name": "Phone X",
    "slug": "phone-x",
    "sku": "PX-1",
    "categoryIds": ["cat-1"],
    "brandIds": ["brand-1"],
    "isActive": True,
    "lowStockAlert": 3,
    "images": [
        {"id": "img-1", "imageUrl": "https://cdn.test/phone-x-thumb.jpg", "isThumbnail": True},
        {"id": "img-2", "imageUrl": "https://cdn.test/phone-x-front.jpg", "altText": "front", "displayOrder": 1},
    ],
    "networks": [
        {
            "id": "n-1",
            "networkName": "5G",
            "isDefault": True,
            "hasDefaultStorages": True,
            "displayOrder": 0,
            "defaultStorages": [
                {
                    "id": "st-1",
                    "storageSize": "128GB",
                    "displayOrder": 0,
                    "price": {"regular": 1000, "discountPercent": 10, "stockQuantity": 7},
                },
            ],
            "colors": [
                {
                    "id": "c-1",
                    "colorName": "Black",
                    "colorImage": "https://cdn.test/black.jpg",
                    "hasStorage": True,
                    "useDefaultStorages": True,
                    "displayOrder": 0,
                },
                {
                    "id": "c-2",
                    "colorName": "Blue",
                    "hasStorage": True,
                    "useDefaultStorages": False,
                    "displayOrder": 1,
                    "storages": [
                        {
                            "id": "st-9",
                            "storageSize": "256GB",
                            "price": {"regular": 1200, "discount": 1100, "stockQuantity": 2},
                        },
                    ],
                },
            ],
        },
        {
            "id": "n-2",
            "networkName": "4G",
            "isDefault": False,
            "hasDefaultStorages": False,
            "displayOrder": 1,
            "colors": [
                {
                    "id": "c-3",
                    "colorName": "Red",
                    "hasStorage": False,
                    "singlePrice": 500,
                    "singleComparePrice": 550,
                    "singleStockQuantity": 4,
                },
            ],
        },
    ],
}

REGION_DOCUMENT = {
    "id": "p-200",
    "productType": "region",
    "name": "Tablet Y",
    "regions": [
        {
            "id": "r-1",
            "regionName": "Global",
            "isDefault": True,
            "defaultStorages": [
                {"id": "rs-1", "storageSize": "64GB", "regularPrice": 800, "discountPrice": 720, "stockQuantity": 9},
            ],
            "colors": [{"id": "rc-1", "colorName": "Silver", "hasStorage": True, "useDefaultStorages": True}],
        },
    ],
}

BASIC_DOCUMENT = {
    "id": "p-300",
    "productType": "basic",
    "name": "Phone Case",
    "directColors": [
        {"id": "bc-1", "colorName": "Green", "regularPrice": 50, "discountPrice": 40, "stockQuantity": 12},
        {"id": "bc-2", "colorName": "Pink", "stockQuantity": 0},
    ],
    "specifications": [{"id": "sp-1", "specKey": "Material", "specValue": "Silicone"}],
    "videos": [{"id": "v-1", "videoUrl": "https://youtu.be/abc", "videoType": "youtube"}],
    "tags": ["case", "silicone"],
}


@pytest.fixture
def network_document():
    return copy.deepcopy(NETWORK_DOCUMENT)


@pytest.fixture
def region_document():
    return copy.deepcopy(REGION_DOCUMENT)


@pytest.fixture
def basic_document():
    return copy.deepcopy(BASIC_DOCUMENT)


@pytest.fixture
def network_product(network_document):
    return hydrate_product(network_document)


@pytest.fixture
def region_product(region_document):
    return hydrate_product(region_document)


@pytest.fixture
def basic_product(basic_document):
    return hydrate_product(basic_document)


@pytest.fixture
def png_file():
    """Arquivo de imagem pendente (conteúdo fictício)"""
    return PendingFile(filename="black.png", content=b"\x89PNG-fake", content_type="image/png")


@pytest.fixture
def jpg_file():
    return PendingFile(filename="blue.jpg", content=b"\xff\xd8JPEG-fake", content_type="image/jpeg")
