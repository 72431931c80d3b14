# charlotte/models/pattern.py
import uuid
from datetime import datetime

from pydantic import field_validator
from sqlmodel import SQLModel, Field


class Pattern(SQLModel):
    """
    Catalog entry ("estampa") stored in the ``estampas`` table.

    - tags: ordered, free-form; the backend does not enforce uniqueness
    - paleta_cores: color name -> color value (e.g. "Coral" -> "#ff7f50");
      insertion order is irrelevant, only the values are filtered on
    - imagem_url: public URL; defaults to the placeholder image at creation
    """

    id: uuid.UUID

    nome: str = Field(description="Display name of the pattern")

    codigo: str = Field(description="Catalog code (unique-ish)")

    descricao: str | None = Field(
        default=None,
        description="Optional long description",
    )

    imagem_url: str | None = Field(
        default=None,
        description="Public image URL",
    )

    tags: list[str] = Field(default_factory=list)

    paleta_cores: dict[str, str] = Field(default_factory=dict)

    criado_por: uuid.UUID | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags(cls, v):
        # Rows written outside this service may carry NULL
        return [] if v is None else v

    @field_validator("paleta_cores", mode="before")
    @classmethod
    def null_palette(cls, v):
        return {} if v is None else v

    @property
    def color_values(self) -> set[str]:
        return set(self.paleta_cores.values())
