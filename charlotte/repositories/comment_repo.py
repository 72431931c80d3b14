# charlotte/repositories/comment_repo.py
import uuid

from charlotte.core.gateway import Gateway, Query
from charlotte.models.comment import Comment

TABLE = "comentarios"

COLUMNS = "*, usuario:usuarios_ext(nome_completo, avatar_url)"


class CommentRepository:
    def list_for_pattern(self, gateway: Gateway, pattern_id: uuid.UUID) -> list[Comment]:
        rows = gateway.select(
            Query(table=TABLE, columns=COLUMNS, match={"estampa_id": str(pattern_id)})
        )
        return [Comment.model_validate(r) for r in rows]

    def create(
        self,
        gateway: Gateway,
        *,
        pattern_id: uuid.UUID,
        user_id: uuid.UUID,
        texto: str,
    ) -> Comment:
        """
        Insert a comment and return it with its author expanded.
        """
        row = gateway.insert(
            TABLE,
            {"estampa_id": str(pattern_id), "usuario_id": str(user_id), "texto": texto},
        )
        expanded = gateway.select_one(TABLE, {"id": row["id"]}, columns=COLUMNS)
        return Comment.model_validate(expanded or row)
