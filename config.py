import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

TRUTHY = {"1", "true", "yes", "on"}


def _cwd_dir(name: str) -> Path:
    return Path.cwd() / name


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration, read once at startup"""
    database_url: Optional[str] = None
    password: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8000
    # Templates and assets live under the working directory, not the install
    views_dir: Path = field(default_factory=lambda: _cwd_dir("views"))
    public_dir: Path = field(default_factory=lambda: _cwd_dir("public"))
    create_schema: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> "Settings":
        port = (environ.get("PORT") or "8000").strip()
        if not port.isdigit():
            raise RuntimeError(f"PORT must be an integer (got {port!r})")

        return cls(
            database_url=environ.get("DATABASE_URL") or None,
            password=environ.get("PASSWORD"),
            host=(environ.get("HOST") or "0.0.0.0").strip(),
            port=int(port),
            views_dir=Path(environ.get("VIEWS_DIR") or _cwd_dir("views")),
            public_dir=Path(environ.get("PUBLIC_DIR") or _cwd_dir("public")),
            create_schema=(environ.get("CREATE_SCHEMA") or "").strip().lower() in TRUTHY,
            log_level=(environ.get("LOG_LEVEL") or "INFO").strip().upper(),
        )
