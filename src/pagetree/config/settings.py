"""pagetree settings: CLI flags over ``PAGETREE_*`` env vars over ``pagetree.toml``.

Nested sections take ``__`` in env names, e.g.
``PAGETREE_PERSISTENCE__MAX_WORKERS=4``. Anything unset falls back to the
defaults on the section models.
"""

from __future__ import annotations

import os
import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pagetree.config.models import EditorConfig, PaletteConfig, PersistenceConfig, WorkspaceConfig

CONFIG_FILENAME = "pagetree.toml"
CONFIG_ENV_VAR = "PAGETREE_CONFIG"

# Parsed pagetree.toml for the settings object being built by from_cli
_file_values: ContextVar[dict[str, Any]] = ContextVar("pagetree_file_values", default={})


def find_config(start: Path | None = None) -> Path | None:
    """Locate the ``pagetree.toml`` governing *start* (default: CWD).

    ``PAGETREE_CONFIG`` wins when set and must name an existing file. Otherwise
    the nearest ``pagetree.toml`` in *start* or one of its parents is used, the
    way git finds ``.git/``.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None
    here = (start or Path.cwd()).resolve()
    candidates = (directory / CONFIG_FILENAME for directory in (here, *here.parents))
    return next((path for path in candidates if path.is_file()), None)


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path*; a syntax error becomes a ClickException naming the file."""
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


class _ConfigFileSource(PydanticBaseSettingsSource):
    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        values = _file_values.get()
        return values.get(field_name), field_name, field_name in values

    def __call__(self) -> dict[str, Any]:
        return dict(_file_values.get())


class PagetreeSettings(BaseSettings):
    """Everything a command needs to know about how it was invoked.

    ``workspace_root`` holds ``.pagetree/``: the directory of the config file
    in use, or the CWD when there is none.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PAGETREE_",
        "env_nested_delimiter": "__",
    }

    workspace_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    sync: bool = False

    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    palette: PaletteConfig = Field(default_factory=PaletteConfig)

    @property
    def async_saves(self) -> bool:
        """Whether saves run on worker threads (``--sync`` forces inline saves)."""
        return self.persistence.async_saves and not self.sync

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, _ConfigFileSource(settings_cls))

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        workspace_root: Path | None = None,
        **cli_flags: Any,
    ) -> PagetreeSettings:
        """Build settings for one invocation.

        ``-c`` names the config file directly (ignored if it does not exist);
        otherwise :func:`find_config` looks upward from *workspace_root*.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(workspace_root)

        if workspace_root is None:
            workspace_root = toml_path.parent if toml_path else Path.cwd()

        token = _file_values.set(read_config(toml_path) if toml_path else {})
        try:
            return cls(workspace_root=workspace_root, config_path=toml_path, **cli_flags)
        finally:
            _file_values.reset(token)
