"""Local JSON file profile repository."""

import json
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from can_i_have_this.services.profiles import ProfileRepository

@dataclass
class JsonFileProfileRepository(ProfileRepository):
    """Stores each profile record as a JSON file in a directory."""

    root: Path

    def get(self, key: str) -> dict[str, object] | None:
        """Return the parsed record for a key, if the file exists."""
        path = self._path_for(key)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def put(self, key: str, payload: dict[str, object]) -> None:
        """Write the record for a key, replacing the file atomically."""
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        """Remove the file for a key; missing files are ignored."""
        self._path_for(key).unlink(missing_ok=True)

    def _path_for(self, key: str) -> Path:
        # Percent-encoding keeps distinct keys in distinct files.
        return self.root / f"{quote(key, safe='@.-')}.json"
