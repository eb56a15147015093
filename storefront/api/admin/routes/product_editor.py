# storefront/api/admin/routes/product_editor.py
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from starlette import status

from storefront.api.admin.services.edit_session_service import (
    EditSession,
    EditSessionService,
    SessionNotFoundError,
    get_edit_session_service,
)
from storefront.api.clients.catalog_client import CatalogClientError
from storefront.api.schemas.products.editor import (
    AddItemRequest,
    MoveItemRequest,
    OpenSessionRequest,
    PreviewOut,
    SessionOut,
    UpdateFieldRequest,
)
from storefront.api.schemas.products.media import PendingFile
from storefront.api.services.payload_serializer import PayloadValidationError
from storefront.core.config import config
from storefront.core.utils.enums import EditableKind, ProductType

log = logging.getLogger(__name__)

router = APIRouter(prefix="/products/editor", tags=["Product Editor"])

GetSessionServiceDep = Annotated[EditSessionService, Depends(get_edit_session_service)]


# ===================================================================
# HELPERS
# ===================================================================

def _session_or_404(service: EditSessionService, session_id: str) -> EditSession:
    try:
        return service.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Edit session not found")


def _session_out(session: EditSession, applied: bool = True, item=None) -> SessionOut:
    return SessionOut(
        session_id=session.session_id,
        product_type=session.product.product_type,
        applied=applied,
        item=item.model_dump(by_alias=True, mode="json") if item is not None else None,
        product=session.product.model_dump(by_alias=True, mode="json"),
    )


def _validation_http_error(e: PayloadValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "message": "Product validation failed",
            "issues": [issue.model_dump(by_alias=True) for issue in e.issues],
        },
    )


async def _read_upload(upload: UploadFile) -> PendingFile:
    limit = config.MAX_UPLOAD_BYTES
    if upload.size is not None and upload.size > limit:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")
    # Lê no máximo limite + 1 byte quando o tamanho não é conhecido
    content = await upload.read(limit + 1)
    if len(content) > limit:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")
    return PendingFile(
        filename=upload.filename or "upload",
        content=content,
        content_type=upload.content_type,
    )


# ===================================================================
# 🔥 SESSÕES
# ===================================================================

@router.post("/sessions", response_model=SessionOut, status_code=201)
async def open_session(body: OpenSessionRequest, service: GetSessionServiceDep):
    """Busca o produto no backend e abre a sessão de edição."""
    try:
        session = await service.open(body.product_id)
    except CatalogClientError as e:
        raise HTTPException(status_code=e.status_code if e.status_code == 404 else 502, detail=e.message)
    return _session_out(session)


@router.get("/sessions/{session_id}", response_model=SessionOut)
async def get_session(session_id: str, service: GetSessionServiceDep):
    return _session_out(_session_or_404(service, session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str, service: GetSessionServiceDep):
    if not service.close(session_id):
        raise HTTPException(status_code=404, detail="Edit session not found")


# ===================================================================
# 🔥 CAMPOS DO PRODUTO
# ===================================================================

@router.patch("/sessions/{session_id}/product", response_model=SessionOut)
async def update_product_field(session_id: str, body: UpdateFieldRequest, service: GetSessionServiceDep):
    session = _session_or_404(service, session_id)
    applied = session.editor.update_product(body.field, body.value)
    return _session_out(session, applied)


@router.patch("/sessions/{session_id}/seo", response_model=SessionOut)
async def update_seo_field(session_id: str, body: UpdateFieldRequest, service: GetSessionServiceDep):
    session = _session_or_404(service, session_id)
    applied = session.editor.update_seo(body.field, body.value)
    return _session_out(session, applied)


@router.post("/sessions/{session_id}/categories/{category_id}/toggle", response_model=SessionOut)
async def toggle_category(session_id: str, category_id: str, service: GetSessionServiceDep):
    session = _session_or_404(service, session_id)
    session.editor.toggle_category(category_id)
    return _session_out(session)


@router.post("/sessions/{session_id}/brands/{brand_id}/toggle", response_model=SessionOut)
async def toggle_brand(session_id: str, brand_id: str, service: GetSessionServiceDep):
    session = _session_or_404(service, session_id)
    session.editor.toggle_brand(brand_id)
    return _session_out(session)


# ===================================================================
# 🔥 MÍDIA DO PRODUTO
# ===================================================================

@router.post("/sessions/{session_id}/thumbnail", response_model=SessionOut)
async def attach_thumbnail(session_id: str, service: GetSessionServiceDep, image: UploadFile = File(...)):
    session = _session_or_404(service, session_id)
    session.editor.attach_thumbnail(await _read_upload(image))
    return _session_out(session)


@router.delete("/sessions/{session_id}/thumbnail", response_model=SessionOut)
async def remove_thumbnail(session_id: str, service: GetSessionServiceDep):
    session = _session_or_404(service, session_id)
    session.editor.remove_thumbnail()
    return _session_out(session)


@router.post("/sessions/{session_id}/gallery", response_model=SessionOut)
async def attach_gallery_image(
        session_id: str,
        service: GetSessionServiceDep,
        image: UploadFile = File(...),
        alt_text: str = Form("", alias="altText"),
):
    session = _session_or_404(service, session_id)
    session.editor.attach_gallery_image(await _read_upload(image), alt_text)
    return _session_out(session)


@router.delete("/sessions/{session_id}/gallery/{index}", response_model=SessionOut)
async def remove_gallery_image(session_id: str, index: int, service: GetSessionServiceDep):
    session = _session_or_404(service, session_id)
    applied = session.editor.remove_gallery_image(index)
    return _session_out(session, applied)


# ===================================================================
# 🔥 IMAGENS (ficam pendentes até o envio)
# ===================================================================

@router.post("/sessions/{session_id}/colors/{color_id}/image", response_model=SessionOut)
async def attach_color_image(
        session_id: str,
        color_id: str,
        service: GetSessionServiceDep,
        image: UploadFile = File(...),
):
    session = _session_or_404(service, session_id)
    pending = await _read_upload(image)
    applied = session.editor.attach_color_image(color_id, pending)
    return _session_out(session, applied)


@router.delete("/sessions/{session_id}/colors/{color_id}/image", response_model=SessionOut)
async def remove_color_image(session_id: str, color_id: str, service: GetSessionServiceDep):
    session = _session_or_404(service, session_id)
    applied = session.editor.remove_color_image(color_id)
    return _session_out(session, applied)


# ===================================================================
# 🔥 PRÉ-VISUALIZAÇÃO E ENVIO
# ===================================================================

@router.get("/sessions/{session_id}/preview", response_model=PreviewOut)
async def preview_payload(session_id: str, service: GetSessionServiceDep):
    """Documento serializado sem enviar nada ao backend."""
    _session_or_404(service, session_id)
    try:
        payload = service.preview(session_id)
    except PayloadValidationError as e:
        raise _validation_http_error(e)
    return PreviewOut(
        document=payload.document,
        attachments=[
            {"partName": a.part_name, "owner": a.owner, "filename": a.file.filename, "size": a.file.size}
            for a in payload.attachments
        ],
    )


@router.post("/sessions/{session_id}/submit")
async def submit_session(session_id: str, service: GetSessionServiceDep):
    _session_or_404(service, session_id)
    try:
        return await service.submit(session_id)
    except PayloadValidationError as e:
        raise _validation_http_error(e)
    except CatalogClientError as e:
        log.error(f"Falha ao enviar sessão {session_id}: {e.message}")
        raise HTTPException(status_code=502, detail=e.message)


# ===================================================================
# 🔥 LINHAS EDITÁVEIS (manter no fim: /{kind} casa qualquer segmento)
# ===================================================================

@router.post("/sessions/{session_id}/{kind}", response_model=SessionOut)
async def add_item(
        session_id: str,
        kind: EditableKind,
        service: GetSessionServiceDep,
        body: Optional[AddItemRequest] = None,
):
    """Adiciona uma linha nova (id placeholder). Pai inexistente = no-op."""
    session = _session_or_404(service, session_id)
    editor = session.editor
    parent_id = body.parent_id if body else None

    if kind in (EditableKind.NETWORK, EditableKind.REGION):
        axis_type = ProductType.NETWORK if kind == EditableKind.NETWORK else ProductType.REGION
        item = editor.add_axis() if session.product.product_type == axis_type else None
    elif kind == EditableKind.COLOR:
        item = editor.add_color(parent_id)
    elif kind == EditableKind.DEFAULT_STORAGE:
        item = editor.add_default_storage(parent_id) if parent_id else None
    elif kind == EditableKind.STORAGE:
        item = editor.add_storage(parent_id) if parent_id else None
    elif kind == EditableKind.SPECIFICATION:
        item = editor.add_specification()
    else:
        item = editor.add_video()

    return _session_out(session, applied=item is not None, item=item)


@router.patch("/sessions/{session_id}/{kind}/{item_id}", response_model=SessionOut)
async def update_item(
        session_id: str,
        kind: EditableKind,
        item_id: str,
        body: UpdateFieldRequest,
        service: GetSessionServiceDep,
):
    session = _session_or_404(service, session_id)
    editor = session.editor
    if kind in (EditableKind.NETWORK, EditableKind.REGION):
        applied = editor.update_axis(item_id, body.field, body.value)
    elif kind == EditableKind.COLOR:
        applied = editor.update_color(item_id, body.field, body.value)
    elif kind in (EditableKind.DEFAULT_STORAGE, EditableKind.STORAGE):
        applied = editor.update_storage(item_id, body.field, body.value)
    else:
        applied = editor.update_row(item_id, body.field, body.value)
    return _session_out(session, applied)


@router.delete("/sessions/{session_id}/{kind}/{item_id}", response_model=SessionOut)
async def remove_item(session_id: str, kind: EditableKind, item_id: str, service: GetSessionServiceDep):
    session = _session_or_404(service, session_id)
    editor = session.editor
    if kind in (EditableKind.NETWORK, EditableKind.REGION):
        applied = editor.remove_axis(item_id)
    elif kind == EditableKind.COLOR:
        applied = editor.remove_color(item_id)
    elif kind in (EditableKind.DEFAULT_STORAGE, EditableKind.STORAGE):
        applied = editor.remove_storage(item_id)
    else:
        applied = editor.remove_row(item_id)
    return _session_out(session, applied)


@router.post("/sessions/{session_id}/items/{item_id}/move", response_model=SessionOut)
async def move_item(session_id: str, item_id: str, body: MoveItemRequest, service: GetSessionServiceDep):
    session = _session_or_404(service, session_id)
    applied = session.editor.move(item_id, body.new_index)
    return _session_out(session, applied)


