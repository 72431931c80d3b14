# charlotte/routers/users.py
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from charlotte.core.auth import get_auth_context, get_gateway, require_auth
from charlotte.core.auth_context import AuthContext
from charlotte.core.gateway import Gateway
from charlotte.models.user import User
from charlotte.repositories.user_repo import UserRepository
from charlotte.schemas.user import UserRead, UserUpdate
from charlotte.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

service = UserService(UserRepository())


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    The profile is created on the first authenticated request.
    """
    return UserRead.from_user(current_user)


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: UserUpdate,
    gateway: Gateway = Depends(get_gateway),
    context: AuthContext = Depends(get_auth_context),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Currently, only `nome_completo` is editable.
    """
    user = service.update_me(gateway, current_user, payload)
    context.update_usuario(user)
    return UserRead.from_user(user)


@router.post("/me/avatar", response_model=UserRead)
def upload_avatar(
    file: UploadFile = File(...),
    gateway: Gateway = Depends(get_gateway),
    context: AuthContext = Depends(get_auth_context),
    current_user: User = Depends(require_auth),
):
    """
    Upload or replace the avatar (JPG, GIF or PNG, max 1MB).
    """
    if not file.content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content-type for uploaded file",
        )

    user = service.set_avatar(gateway, current_user, file.content_type, file.file.read())
    context.update_usuario(user)
    return UserRead.from_user(user)
