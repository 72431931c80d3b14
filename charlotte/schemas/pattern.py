# charlotte/schemas/pattern.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


def normalize_tags(tags: list[str]) -> list[str]:
    """
    Tags behave as an ordered set: stripped, blanks dropped, first
    occurrence kept.
    """
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def normalize_palette(palette: dict[str, str]) -> dict[str, str]:
    """Drop entries with a blank name or value; later names win."""
    result: dict[str, str] = {}
    for name, value in palette.items():
        name = name.strip()
        value = value.strip()
        if name and value:
            result[name] = value
    return result


class PatternCreate(SQLModel):
    """
    Payload for creating a pattern (admin).

    - imagem_url is not accepted here: the placeholder is used until an
      image is uploaded.
    """

    model_config = ConfigDict(extra="forbid")

    nome: str = Field(max_length=255)
    codigo: str = Field(max_length=100)
    descricao: str | None = None
    tags: list[str] = Field(default_factory=list)
    paleta_cores: dict[str, str] = Field(default_factory=dict)

    @field_validator("nome", "codigo")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("descricao")
    @classmethod
    def normalize_description(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)

    @field_validator("paleta_cores")
    @classmethod
    def clean_palette(cls, v: dict[str, str]) -> dict[str, str]:
        return normalize_palette(v)


class PatternUpdate(SQLModel):
    """
    Partial update payload for patterns.
    Omitted fields are left unchanged; tags and paleta_cores replace the
    stored value. Only descricao may be cleared with null.
    """

    model_config = ConfigDict(extra="forbid")

    nome: str | None = Field(default=None, max_length=255)
    codigo: str | None = Field(default=None, max_length=100)
    descricao: str | None = None
    tags: list[str] | None = None
    paleta_cores: dict[str, str] | None = None

    @field_validator("nome", "codigo")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("field cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("tags")
    @classmethod
    def unique_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            raise ValueError("tags cannot be null; send [] to clear them")
        return normalize_tags(v)

    @field_validator("paleta_cores")
    @classmethod
    def clean_palette(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        if v is None:
            raise ValueError("paleta_cores cannot be null; send {} to clear it")
        return normalize_palette(v)

    @field_validator("descricao")
    @classmethod
    def normalize_description(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None


class PatternRead(SQLModel):
    """
    Pattern representation for clients.
    """

    id: uuid.UUID
    nome: str
    codigo: str
    descricao: str | None
    imagem_url: str | None
    tags: list[str]
    paleta_cores: dict[str, str]
    criado_por: uuid.UUID | None
    created_at: datetime | None
    updated_at: datetime | None


class CatalogFacets(SQLModel):
    """Values offered by the catalog filter panel."""

    tags: list[str]
    cores: list[str]


class FavoriteStatus(SQLModel):
    estampa_id: uuid.UUID
    favorita: bool
