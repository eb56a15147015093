from fastapi import APIRouter

from storefront.api.admin.routes.product_editor import router as product_editor_router

router = APIRouter(prefix="/admin")

router.include_router(product_editor_router)
