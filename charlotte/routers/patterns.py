# charlotte/routers/patterns.py
import uuid

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    HTTPException,
    Query,
    UploadFile,
    status,
)

from charlotte.core.auth import get_gateway, require_admin, require_auth
from charlotte.core.config import get_settings
from charlotte.core.filters import CatalogFilter
from charlotte.core.gateway import Gateway
from charlotte.core.storage_utils import delete_public_url_quietly
from charlotte.models.user import User
from charlotte.repositories.comment_repo import CommentRepository
from charlotte.repositories.favorite_repo import FavoriteRepository
from charlotte.repositories.pattern_repo import PatternRepository
from charlotte.schemas.comment import CommentCreate, CommentRead
from charlotte.schemas.pattern import (
    CatalogFacets,
    FavoriteStatus,
    PatternCreate,
    PatternRead,
    PatternUpdate,
)
from charlotte.services.catalog import PatternCatalog, get_catalog
from charlotte.services.comment_service import CommentService
from charlotte.services.favorite_service import FavoriteService
from charlotte.services.pattern_service import FilterMode, PatternService

router = APIRouter(prefix="/patterns", tags=["Patterns"])

settings = get_settings()

service = PatternService(PatternRepository())
favorites = FavoriteService(FavoriteRepository())
comments = CommentService(CommentRepository())


# -------- Catalog --------


@router.get("", response_model=list[PatternRead], dependencies=[Depends(require_auth)])
def list_patterns(
    q: str = "",
    tags: list[str] = Query(default=[]),
    cores: list[str] = Query(default=[]),
    mode: FilterMode = "client",
    gateway: Gateway = Depends(get_gateway),
    catalog: PatternCatalog = Depends(get_catalog),
):
    """
    List the catalog, newest first.

    - `q` matches name, code or description (case-insensitive).
    - `tags` / `cores` keep patterns sharing ANY of the given values.
    - `mode=hybrid` lets the backend evaluate `q` and `tags`.
    """
    filters = CatalogFilter(text=q, tags=tags, colors=cores)
    return service.list_patterns(gateway, catalog, filters, mode)


@router.get("/facets", response_model=CatalogFacets, dependencies=[Depends(require_auth)])
def get_facets(
    gateway: Gateway = Depends(get_gateway),
    catalog: PatternCatalog = Depends(get_catalog),
):
    """Tags and colors available for filtering."""
    return service.facets(gateway, catalog)


@router.post(
    "/reload",
    response_model=list[PatternRead],
    dependencies=[Depends(require_admin)],
)
def reload_catalog(
    gateway: Gateway = Depends(get_gateway),
    catalog: PatternCatalog = Depends(get_catalog),
):
    """
    Reload the catalog snapshot from the backend (admin only).

    Picks up edits made outside this process.
    """
    return service.reload_catalog(gateway, catalog)


@router.get("/{pattern_id}", response_model=PatternRead, dependencies=[Depends(require_auth)])
def get_pattern(
    pattern_id: uuid.UUID,
    gateway: Gateway = Depends(get_gateway),
):
    return service.get_pattern(gateway, pattern_id)


# -------- Admin endpoints --------


@router.post("", response_model=PatternRead, status_code=status.HTTP_201_CREATED)
def create_pattern(
    payload: PatternCreate,
    gateway: Gateway = Depends(get_gateway),
    catalog: PatternCatalog = Depends(get_catalog),
    admin: User = Depends(require_admin),
):
    """
    Create a new pattern (admin only).
    """
    return service.create_pattern(gateway, catalog, admin, payload)


@router.patch(
    "/{pattern_id}",
    response_model=PatternRead,
    dependencies=[Depends(require_admin)],
)
def update_pattern(
    pattern_id: uuid.UUID,
    payload: PatternUpdate,
    gateway: Gateway = Depends(get_gateway),
    catalog: PatternCatalog = Depends(get_catalog),
):
    """
    Update an existing pattern (admin only).
    """
    return service.update_pattern(gateway, catalog, pattern_id, payload)


@router.delete(
    "/{pattern_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_pattern(
    pattern_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    gateway: Gateway = Depends(get_gateway),
    catalog: PatternCatalog = Depends(get_catalog),
):
    """
    Delete a pattern (admin only).

    - The stored image is removed afterwards, best-effort.
    """
    image_url = service.delete_pattern(gateway, catalog, pattern_id)
    background_tasks.add_task(
        delete_public_url_quietly, gateway, image_url, settings.STORAGE_BUCKET
    )
    return None


@router.post(
    "/{pattern_id}/image",
    response_model=PatternRead,
    dependencies=[Depends(require_admin)],
    summary="Upload or replace the image of a pattern",
)
def upload_image(
    pattern_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    gateway: Gateway = Depends(get_gateway),
    catalog: PatternCatalog = Depends(get_catalog),
):
    """
    Upload a new image for the pattern.

    - Accepts JPEG, PNG, WEBP.
    - The previous image is deleted after the response, best-effort.
    """
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    file_bytes = file.file.read()
    pattern, old_url = service.set_image(
        gateway=gateway,
        catalog=catalog,
        pattern_id=pattern_id,
        content_type=file.content_type,
        file_bytes=file_bytes,
    )
    background_tasks.add_task(
        delete_public_url_quietly, gateway, old_url, settings.STORAGE_BUCKET
    )
    return pattern


# -------- Favorite --------


@router.get("/{pattern_id}/favorite", response_model=FavoriteStatus)
def get_favorite(
    pattern_id: uuid.UUID,
    gateway: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_auth),
):
    return FavoriteStatus(
        estampa_id=pattern_id,
        favorita=favorites.is_favorite(gateway, current_user.id, pattern_id),
    )


@router.post("/{pattern_id}/favorite", response_model=FavoriteStatus)
def toggle_favorite(
    pattern_id: uuid.UUID,
    gateway: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_auth),
):
    """
    Favorite the pattern if it is not, unfavorite it otherwise.
    """
    return FavoriteStatus(
        estampa_id=pattern_id,
        favorita=favorites.toggle(gateway, current_user.id, pattern_id),
    )


# -------- Comments --------


@router.get(
    "/{pattern_id}/comments",
    response_model=list[CommentRead],
    dependencies=[Depends(require_auth)],
)
def list_comments(
    pattern_id: uuid.UUID,
    gateway: Gateway = Depends(get_gateway),
):
    return comments.list_comments(gateway, pattern_id)


@router.post(
    "/{pattern_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    pattern_id: uuid.UUID,
    payload: CommentCreate,
    gateway: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_auth),
):
    """
    Publish a comment on the pattern as the current user.
    """
    return comments.add_comment(gateway, current_user.id, pattern_id, payload)
