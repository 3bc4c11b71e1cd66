"""pubconfig settings, read from environment variables in one place."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path

DEFAULT_REQUIRED_FIELDS: tuple[str, ...] = (
    "publisherId",
    "aliasName",
    "pages",
    "publisherDashboard",
    "monitorDashboard",
    "qaStatusDashboard",
)

DATA_DIR_ENV_VAR = "PUBCONFIG_DATA_DIR"
HISTORY_DIR_ENV_VAR = "PUBCONFIG_HISTORY_DIR"
HOST_ENV_VAR = "PUBCONFIG_HOST"
PORT_ENV_VAR = "PUBCONFIG_PORT"
REQUIRED_FIELDS_ENV_VAR = "PUBCONFIG_REQUIRED_FIELDS"
LOG_LEVEL_ENV_VAR = "PUBCONFIG_LOG_LEVEL"
STORE_URL_ENV_VAR = "PUBCONFIG_STORE_URL"


def parse_required_fields(raw: str | None) -> tuple[str, ...]:
    if raw is None or not raw.strip():
        return DEFAULT_REQUIRED_FIELDS
    names: list[str] = []
    for item in raw.split(","):
        name = item.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


@dataclass(slots=True)
class Settings:
    """Runtime settings for the store, server and CLI."""

    data_dir: Path = Path("data")
    history_dir: Path | None = None
    host: str = "127.0.0.1"
    port: int = 3000
    required_fields: tuple[str, ...] = field(default=DEFAULT_REQUIRED_FIELDS)
    log_level: str = "WARNING"
    store_url: str | None = None

    @property
    def resolved_history_dir(self) -> Path:
        if self.history_dir is not None:
            return self.history_dir
        return self.data_dir / "history"

    @classmethod
    def from_env(cls) -> "Settings":
        data_dir = Path(os.environ.get(DATA_DIR_ENV_VAR, "data"))
        history_raw = os.environ.get(HISTORY_DIR_ENV_VAR, "").strip()
        port_raw = os.environ.get(PORT_ENV_VAR, "").strip()
        try:
            port = int(port_raw) if port_raw else 3000
        except ValueError as error:
            raise ValueError(f"{PORT_ENV_VAR} must be an integer, got {port_raw!r}") from error
        return cls(
            data_dir=data_dir,
            history_dir=Path(history_raw) if history_raw else None,
            host=os.environ.get(HOST_ENV_VAR, "127.0.0.1"),
            port=port,
            required_fields=parse_required_fields(os.environ.get(REQUIRED_FIELDS_ENV_VAR)),
            log_level=os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper(),
            store_url=os.environ.get(STORE_URL_ENV_VAR, "").strip() or None,
        )
