# charlotte/routers/favorites.py
from fastapi import APIRouter, Depends

from charlotte.core.auth import get_gateway, require_auth
from charlotte.core.gateway import Gateway
from charlotte.models.user import User
from charlotte.repositories.favorite_repo import FavoriteRepository
from charlotte.schemas.pattern import PatternRead
from charlotte.services.favorite_service import FavoriteService

router = APIRouter(prefix="/favorites", tags=["Favorites"])

service = FavoriteService(FavoriteRepository())


@router.get("", response_model=list[PatternRead])
def list_my_favorites(
    gateway: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_auth),
):
    """
    Patterns the current user has favorited.
    """
    return service.list_favorites(gateway, current_user.id)
