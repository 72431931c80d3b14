# charlotte/services/catalog.py
import logging

from fastapi import Request

from charlotte.core.gateway import Gateway
from charlotte.core.reconciler import ListState
from charlotte.models.pattern import Pattern
from charlotte.repositories.pattern_repo import PatternRepository

logger = logging.getLogger(__name__)


class PatternCatalog(ListState[Pattern]):
    """
    Process-wide snapshot of the catalog, newest first.

    Created and torn down by the app lifespan. Loaded once (lazily or at
    startup), then kept in step with the writes this process performs; edits
    made elsewhere show up after ``reload``.
    """

    def __init__(self, repo: PatternRepository):
        super().__init__()
        self.repo = repo

    def ensure_loaded(self, gateway: Gateway) -> list[Pattern]:
        if not self.loaded:
            self.reload(gateway)
        return self.items

    def reload(self, gateway: Gateway) -> list[Pattern]:
        patterns = self.repo.list_all(gateway)
        self.load(patterns)
        logger.info("Catalog loaded: %d patterns", len(patterns))
        return self.items


def get_catalog(request: Request) -> PatternCatalog:
    """FastAPI dependency: the catalog owned by the running app."""
    return request.app.state.catalog
