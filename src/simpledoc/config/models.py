"""Pydantic configuration models with code-baked defaults.

Sparse JSON contract: defaults baked here, ``simpledoc.json`` only
contains overrides. Keys follow the file format (``titlePrefix``); the
snake_case attribute names are accepted too.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from simpledoc.domain.classifier import DEFAULT_DOCS_ROOT

# --- simpledoc.json sections ---


class DocsConfig(BaseModel):
    """``docs`` section."""

    model_config = {"frozen": True}

    root: str = DEFAULT_DOCS_ROOT


class FrontmatterDefaults(BaseModel):
    """``frontmatter.defaults`` section.

    Blank strings collapse to None and blank tags are dropped, so an
    all-whitespace value behaves exactly like an absent one.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    author: str | None = None
    tags: tuple[str, ...] = ()
    title_prefix: str | None = Field(default=None, alias="titlePrefix")

    @field_validator("author", "title_prefix")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(tag.strip() for tag in value if tag.strip())

    def apply_title_prefix(self, title: str) -> str:
        return f"{self.title_prefix} {title}" if self.title_prefix else title


class FrontmatterConfig(BaseModel):
    """``frontmatter`` section."""

    model_config = {"frozen": True}

    defaults: FrontmatterDefaults = Field(default_factory=FrontmatterDefaults)


class CheckConfig(BaseModel):
    """``check`` section."""

    model_config = {"frozen": True}

    ignore: tuple[str, ...] = ()

    @field_validator("ignore")
    @classmethod
    def _drop_blank(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(p.strip() for p in value if p.strip())
