"""Migration actions — the closed set of plan steps.

A plan is an ordered tuple of actions discriminated by ``type``:

- ``rename``: move ``from_path`` to ``to_path`` (repo-relative, POSIX).
- ``frontmatter``: prepend a YAML block to ``path``.
- ``references``: rewrite literal mentions of renamed paths inside ``path``.

Consumers dispatch with ``match`` and close with ``assert_never`` so that a
new action type fails type-checking at every site that handles actions.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated, Literal, assert_never

from pydantic import BaseModel, Field, TypeAdapter, model_validator


class RenameAction(BaseModel):
    """Move a document to its compliant name."""

    model_config = {"frozen": True}

    type: Literal["rename"] = "rename"
    from_path: str
    to_path: str

    @model_validator(mode="after")
    def _distinct_paths(self) -> RenameAction:
        if self.from_path == self.to_path:
            msg = f"Rename source and target are identical: {self.from_path}"
            raise ValueError(msg)
        return self


class FrontmatterAction(BaseModel):
    """Insert a frontmatter block into a date-prefixed document."""

    model_config = {"frozen": True}

    type: Literal["frontmatter"] = "frontmatter"
    path: str
    title: str
    author: str
    date: str
    tags: tuple[str, ...] = ()


class ReferenceUpdateAction(BaseModel):
    """Rewrite references to renamed documents inside one file."""

    model_config = {"frozen": True}

    type: Literal["references"] = "references"
    path: str
    match_count: int


MigrationAction = Annotated[
    RenameAction | FrontmatterAction | ReferenceUpdateAction,
    Field(discriminator="type"),
]

ACTIONS_ADAPTER: TypeAdapter[list[MigrationAction]] = TypeAdapter(list[MigrationAction])


def describe_action(action: MigrationAction) -> str:
    """One-line human rendering of an action."""
    match action:
        case RenameAction():
            return f"- rename: {action.from_path} -> {action.to_path}"
        case FrontmatterAction():
            return f"- frontmatter: {action.path}"
        case ReferenceUpdateAction():
            return f"- update references: {action.path} ({action.match_count})"
        case _:
            assert_never(action)


def format_actions(actions: Iterable[MigrationAction]) -> str:
    """Render actions one per line for previews."""
    return "\n".join(describe_action(action) for action in actions)


def renames_of(actions: Iterable[MigrationAction]) -> list[RenameAction]:
    return [a for a in actions if isinstance(a, RenameAction)]


def frontmatters_of(actions: Iterable[MigrationAction]) -> list[FrontmatterAction]:
    return [a for a in actions if isinstance(a, FrontmatterAction)]


def references_of(actions: Iterable[MigrationAction]) -> list[ReferenceUpdateAction]:
    return [a for a in actions if isinstance(a, ReferenceUpdateAction)]
