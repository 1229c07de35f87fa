"""Load/save stored dive defaults."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from dive.config.models import StoredDefaults
from dive.paths import ensure_dir, settings_path
from dive.runtime_logging import get_runtime_logger


class SettingsStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or settings_path()

    def load(self) -> StoredDefaults:
        if not self.path.exists():
            return StoredDefaults()

        raw = self.path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw)
            return StoredDefaults.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as exc:
            # Keep the bad payload around for debugging, then run on defaults.
            backup = self.path.with_suffix(".corrupt.json")
            backup.write_text(raw, encoding="utf-8")
            get_runtime_logger().warning(
                "settings.corrupt",
                path=str(self.path),
                backup=str(backup),
                error=str(exc),
            )
            return StoredDefaults()

    def save(self, settings: StoredDefaults) -> None:
        ensure_dir(self.path.parent)
        payload = json.dumps(settings.model_dump(mode="json"), indent=2, sort_keys=True)
        self.path.write_text(f"{payload}\n", encoding="utf-8")

    def update(self, dotted_key: str, value: Any) -> StoredDefaults:
        settings = self.load()
        data = settings.model_dump()

        keys = dotted_key.split(".")
        cursor: dict[str, Any] = data
        for key in keys[:-1]:
            nested = cursor.get(key)
            if not isinstance(nested, dict):
                raise KeyError(f"Unknown setting path: {dotted_key}")
            cursor = nested
        if keys[-1] not in cursor:
            raise KeyError(f"Unknown setting path: {dotted_key}")
        cursor[keys[-1]] = value

        updated = StoredDefaults.model_validate(data)
        self.save(updated)
        return updated
