# charlotte/services/pattern_service.py
import logging
import uuid
from typing import Literal

from fastapi import HTTPException, status

from charlotte.core.config import get_settings
from charlotte.core.filters import (
    CatalogFilter,
    available_colors,
    available_tags,
    filter_by_colors,
    filter_patterns,
    matches_text,
)
from charlotte.core.gateway import Gateway, GatewayError, SilentWriteError
from charlotte.core.storage_utils import (
    delete_public_url_quietly,
    generate_filename,
    validate_image,
)
from charlotte.models.pattern import Pattern
from charlotte.models.user import User
from charlotte.repositories.pattern_repo import PatternRepository
from charlotte.schemas.pattern import CatalogFacets, PatternCreate, PatternUpdate
from charlotte.services.catalog import PatternCatalog

logger = logging.getLogger(__name__)

settings = get_settings()

FilterMode = Literal["client", "hybrid"]

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class PatternService:
    """
    Business logic for the pattern catalog.

    Responsibilities:
      - catalog listing in client or hybrid filter mode
      - admin CRUD, reconciled into the catalog snapshot
      - image upload orchestration with Storage
    """

    def __init__(self, repo: PatternRepository):
        self.repo = repo

    # ----- Catalog -----

    def list_patterns(
        self,
        gateway: Gateway,
        catalog: PatternCatalog,
        filters: CatalogFilter,
        mode: FilterMode = "client",
    ) -> list[Pattern]:
        """
        Filtered catalog, newest first.

        - client: every predicate evaluated over the catalog snapshot
        - hybrid: text/tags evaluated by the backend, colors here; the
          text is checked again here since the backend reads `*` as a
          wildcard
        """
        if mode == "hybrid":
            remote = filter_by_colors(self.repo.search(gateway, filters), filters.colors)
            return [p for p in remote if matches_text(p, filters.text)]
        return filter_patterns(catalog.ensure_loaded(gateway), filters)

    def facets(self, gateway: Gateway, catalog: PatternCatalog) -> CatalogFacets:
        patterns = catalog.ensure_loaded(gateway)
        return CatalogFacets(tags=available_tags(patterns), cores=available_colors(patterns))

    def reload_catalog(self, gateway: Gateway, catalog: PatternCatalog) -> list[Pattern]:
        return catalog.reload(gateway)

    def get_pattern(self, gateway: Gateway, pattern_id: uuid.UUID) -> Pattern:
        pattern = self.repo.get_by_id(gateway, pattern_id)
        if not pattern:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Pattern not found",
            )
        return pattern

    # ----- Admin -----

    def create_pattern(
        self,
        gateway: Gateway,
        catalog: PatternCatalog,
        admin: User,
        payload: PatternCreate,
    ) -> Pattern:
        """
        Create a pattern.

        - imagem_url starts as the placeholder so it is never empty.
        - criado_por is the admin issuing the request.
        """
        values = payload.model_dump(mode="json")
        values["imagem_url"] = settings.DEFAULT_PATTERN_IMAGE_URL
        values["criado_por"] = str(admin.id)

        pattern = self.repo.create(gateway, values)
        catalog.apply_created(pattern)
        logger.info("Pattern %s (%s) created by %s", pattern.id, pattern.codigo, admin.id)
        return pattern

    def update_pattern(
        self,
        gateway: Gateway,
        catalog: PatternCatalog,
        pattern_id: uuid.UUID,
        payload: PatternUpdate,
    ) -> Pattern:
        """
        Partial update; the returned row replaces the catalog copy.
        """
        values = payload.model_dump(mode="json", exclude_unset=True)
        if not values:
            return self.get_pattern(gateway, pattern_id)

        self.get_pattern(gateway, pattern_id)
        pattern = self.repo.update(gateway, pattern_id, values)
        catalog.apply_updated(pattern)
        return pattern

    def delete_pattern(
        self,
        gateway: Gateway,
        catalog: PatternCatalog,
        pattern_id: uuid.UUID,
    ) -> str | None:
        """
        Delete a pattern row.

        Returns:
            The image URL the caller should clean up afterwards.

        Raises:
            HTTPException(404): unknown pattern.
            SilentWriteError: the backend removed nothing (RLS).
        """
        pattern = self.get_pattern(gateway, pattern_id)
        if not self.repo.delete(gateway, pattern_id):
            raise SilentWriteError("Delete was not applied", table="estampas")

        catalog.apply_deleted(pattern_id)
        logger.info("Pattern %s deleted", pattern_id)
        return pattern.imagem_url

    # ----- Image -----

    def set_image(
        self,
        gateway: Gateway,
        catalog: PatternCatalog,
        pattern_id: uuid.UUID,
        content_type: str,
        file_bytes: bytes,
    ) -> tuple[Pattern, str | None]:
        """
        Upload a new image and point the pattern at it.

        Path pattern:
            estampas/<pattern_id>/<uuid>.<ext>

        Returns:
            (updated pattern, previous image URL to delete afterwards)
        """
        pattern = self.get_pattern(gateway, pattern_id)
        ext = validate_image(
            content_type, file_bytes, ALLOWED_IMAGE_CONTENT_TYPES, MAX_IMAGE_BYTES
        )

        path = f"estampas/{pattern.id}/{generate_filename(ext)}"
        new_url = gateway.upload(path, file_bytes, content_type)

        try:
            updated = self.repo.update(gateway, pattern.id, {"imagem_url": new_url})
        except GatewayError:
            # Nothing references the new file
            delete_public_url_quietly(gateway, new_url, settings.STORAGE_BUCKET)
            raise
        catalog.apply_updated(updated)
        return updated, pattern.imagem_url
