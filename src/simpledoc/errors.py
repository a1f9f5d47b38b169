"""Exception hierarchy shared by the planner, applier, and config layer.

Services translate these into :class:`~simpledoc.services.result.ServiceResult`
failures at the CLI boundary; everything below that boundary raises.
"""

from __future__ import annotations


class SimpleDocError(Exception):
    """Base class for all simpledoc failures."""

    code = "SIMPLEDOC_ERROR"


class ConfigurationError(SimpleDocError):
    """An option or config value has the wrong shape or contradicts another."""

    code = "CONFIG_ERROR"


class NotADocumentError(SimpleDocError):
    """A path handed to the classifier is not a Markdown document."""

    code = "NOT_A_DOCUMENT"


class NamingExhaustedError(SimpleDocError):
    """No free filename was found within the suffix bound."""

    code = "NAMING_EXHAUSTED"


class GitError(SimpleDocError):
    """A git subprocess failed or the directory is not a repository."""

    code = "GIT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        command: tuple[str, ...] = (),
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
