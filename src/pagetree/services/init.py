"""InitService — create a workspace: config file and database."""

from __future__ import annotations

from pathlib import Path

from pagetree.config.settings import CONFIG_FILENAME
from pagetree.infrastructure.database.engine import DB_FILENAME, STATE_DIR, init_database
from pagetree.services.result import ServiceResult
from pagetree.services.telemetry import traced


class InitService:
    """Workspace setup. Runs before any Workspace exists, so it is static."""

    @staticmethod
    @traced
    def init_workspace(path: Path, *, name: str) -> ServiceResult:
        op = "init"
        name = name.strip()
        if not name:
            return ServiceResult.failure(op, "INVALID_NAME", "Workspace name must not be blank")

        config_path = path / CONFIG_FILENAME
        if config_path.exists():
            return ServiceResult.failure(
                op,
                "WORKSPACE_EXISTS",
                f"{CONFIG_FILENAME} already exists in {path}",
                path=str(path),
            )

        path.mkdir(parents=True, exist_ok=True)
        config_path.write_text(_render_config(name), encoding="utf-8")
        engine = init_database(path)
        engine.dispose()

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": name,
                "root": str(path),
                "config_path": str(config_path),
                "db_path": str(path / STATE_DIR / DB_FILENAME),
            },
        )


def _render_config(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'[workspace]\nname = "{escaped}"\n\n[persistence]\nasync_saves = true\n'
