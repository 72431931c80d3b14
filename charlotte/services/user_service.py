# charlotte/services/user_service.py
from charlotte.core.gateway import Gateway
from charlotte.models.user import User
from charlotte.repositories.user_repo import UserRepository
from charlotte.schemas.user import UserUpdate
from charlotte.core.storage_utils import validate_image

# --- Avatar config ---

MAX_AVATAR_BYTES = 1 * 1024 * 1024  # 1MB

ALLOWED_AVATAR_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/png": "png",
}


class UserService:
    """
    Business logic for the caller's own profile.

    Responsibilities:
      - profile edits (nome_completo)
      - avatar upload to Storage
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def update_me(
        self,
        gateway: Gateway,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits.
        Currently, only `nome_completo` is editable.
        """
        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not values:
            return current_user
        return self.repo.update(gateway, current_user.id, values)

    def set_avatar(
        self,
        gateway: Gateway,
        current_user: User,
        content_type: str,
        file_bytes: bytes,
    ) -> User:
        """
        Upload or replace the avatar.

        Path pattern (deterministic, overwritten on upsert):
            usuarios/<user_id>/avatar.<ext>
        """
        ext = validate_image(
            content_type, file_bytes, ALLOWED_AVATAR_CONTENT_TYPES, MAX_AVATAR_BYTES
        )
        url = gateway.upload(f"usuarios/{current_user.id}/avatar.{ext}", file_bytes, content_type)
        return self.repo.update(gateway, current_user.id, {"avatar_url": url})
