"""Unified settings — CLI flags, env vars, and JSON config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SIMPLEDOC_*`` prefix (``SIMPLEDOC_DOCS__ROOT`` for nested keys)
  3. JSON files   — ``simpledoc.json`` overlaid with ``.simpledoc.local.json``
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`JsonSettingsSource` fed by
:mod:`simpledoc.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from simpledoc.config.discovery import find_repo_root, load_config_data, normalize_repo_path
from simpledoc.config.models import CheckConfig, DocsConfig, FrontmatterConfig
from simpledoc.domain.classifier import DEFAULT_DOCS_ROOT, normalize_docs_root
from simpledoc.errors import ConfigurationError


class JsonSettingsSource(PydanticBaseSettingsSource):
    """Serve already-loaded JSON config data to Pydantic."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any] | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = data or {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for config data during construction.
_tls = threading.local()


class SimpleDocSettings(BaseSettings):
    """Unified settings for the simpledoc CLI.

    Stored on the :class:`~simpledoc.commands._context.AppContext` at the
    CLI root level.

    Attributes:
        repo_root: Git toplevel of the working directory (or the directory
            itself outside a repository).
        config_path: Explicit ``--config`` override, or None for discovery.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SIMPLEDOC_",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    # --- Resolved path ---
    repo_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    # --- JSON sections ---
    docs: DocsConfig = Field(default_factory=DocsConfig)
    frontmatter: FrontmatterConfig = Field(default_factory=FrontmatterConfig)
    check: CheckConfig = Field(default_factory=CheckConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the JSON source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            JsonSettingsSource(settings_cls, getattr(_tls, "config_data", None)),
        )

    @property
    def docs_root(self) -> str:
        """Configured docs root as a normalized repo-relative path.

        Raises:
            ConfigurationError: the configured path lies outside the repository.
        """
        relative = normalize_repo_path(
            self.docs.root,
            self.repo_root,
            fallback=DEFAULT_DOCS_ROOT,
            label="docs.root",
        )
        return normalize_docs_root(relative)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        repo_root: Path | None = None,
        **cli_flags: Any,
    ) -> SimpleDocSettings:
        """Construct settings from a CLI invocation.

        Resolves the repository root, loads and merges its JSON config
        files (or the single explicit *config_path*), and applies CLI
        flags as highest-priority overrides.

        Raises:
            ConfigurationError: a config file is malformed, or ``docs.root``
                escapes the repository.
        """
        resolved_root = repo_root or find_repo_root()
        explicit = Path(config_path) if config_path else None

        _tls.config_data = load_config_data(resolved_root, explicit)
        try:
            settings = cls(repo_root=resolved_root, config_path=explicit, **cli_flags)
        except ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            msg = f"Invalid configuration: {errors}"
            raise ConfigurationError(msg) from exc
        finally:
            _tls.config_data = None
        # Validate eagerly so a bad docs root fails before any command runs.
        _ = settings.docs_root
        return settings
