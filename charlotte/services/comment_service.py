# charlotte/services/comment_service.py
import uuid

from charlotte.core.gateway import Gateway
from charlotte.models.comment import Comment
from charlotte.repositories.comment_repo import CommentRepository
from charlotte.schemas.comment import CommentCreate


class CommentService:
    def __init__(self, repo: CommentRepository):
        self.repo = repo

    def list_comments(self, gateway: Gateway, pattern_id: uuid.UUID) -> list[Comment]:
        """Comments on a pattern, newest first, with their authors."""
        return self.repo.list_for_pattern(gateway, pattern_id)

    def add_comment(
        self,
        gateway: Gateway,
        user_id: uuid.UUID,
        pattern_id: uuid.UUID,
        payload: CommentCreate,
    ) -> Comment:
        return self.repo.create(
            gateway, pattern_id=pattern_id, user_id=user_id, texto=payload.texto
        )
