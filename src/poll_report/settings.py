"""Persistent renderer settings for poll-report, stored as JSON via platformdirs."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path

import platformdirs

logger = logging.getLogger("poll_report.settings")

_APP_NAME = "poll-report"
_SETTINGS_FILE = "settings.json"

PAGE_SIZES = {
    "a4": (595.0, 842.0),
    "letter": (612.0, 792.0),
}

# Expected types for each field; unknown keys and wrong-typed values are dropped
_FIELD_TYPES: dict[str, type] = {
    "rtl_font_path": str,
    "page_size": str,
    "max_records": int,
    "max_table_rows": int,
    "repeat_table_header": bool,
}


def _config_path() -> Path:
    """Return the platform-appropriate config directory."""
    return Path(platformdirs.user_config_dir(_APP_NAME))


@dataclass
class Settings:
    """Renderer settings shared by every render call in a process."""

    rtl_font_path: str = ""
    page_size: str = "a4"
    max_records: int = 10000
    max_table_rows: int = 1000
    repeat_table_header: bool = False

    @property
    def page_dimensions(self) -> tuple[float, float]:
        return PAGE_SIZES.get(self.page_size.lower(), PAGE_SIZES["a4"])

    def save(self) -> None:
        """Write settings to disk atomically.  Logs warnings on failure."""
        try:
            config_dir = _config_path()
            config_dir.mkdir(parents=True, exist_ok=True)
            filepath = config_dir / _SETTINGS_FILE
            payload = json.dumps(asdict(self), indent=2, ensure_ascii=False)
            fd, tmp = tempfile.mkstemp(dir=config_dir, prefix=".settings-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp, filepath)
            except Exception:
                with contextlib.suppress(OSError):
                    os.unlink(tmp)
                raise
        except OSError as exc:
            logger.warning("Failed to save settings: %s", exc)

    @classmethod
    def load(cls) -> Settings:
        """Load settings from disk.  Returns defaults on any failure."""
        filepath = _config_path() / _SETTINGS_FILE
        try:
            if not filepath.exists():
                return cls()
            data = json.loads(filepath.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Settings file is corrupted, using defaults: %s", filepath)
            return cls()
        except OSError as exc:
            logger.warning("Cannot read settings file: %s", exc)
            return cls()

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format, using defaults")
            return cls()

        filtered: dict[str, object] = {}
        for k, v in data.items():
            expected = _FIELD_TYPES.get(k)
            if expected is None:
                continue
            # bool is a subclass of int; keep the two apart
            if expected is bool:
                if type(v) is bool:
                    filtered[k] = v
            elif expected is int:
                if type(v) is int and v > 0:
                    filtered[k] = v
            elif isinstance(v, expected):
                filtered[k] = v
        if filtered.get("page_size", "a4").lower() not in PAGE_SIZES:
            logger.warning("Unknown page size %r, using A4", filtered["page_size"])
            filtered.pop("page_size")
        return cls(**filtered)  # type: ignore[arg-type]
