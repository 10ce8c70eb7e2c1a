"""Local persistence of a user's answers and ratings, one JSON file per form."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

VALUES_PREFIX = "form_data_"
RATINGS_PREFIX = "form_ratings_"


class LocalAnswerStore:
    """
    Answer values and ratings keyed by form id.

    Storage problems are logged and never raised: reads fall back to ``{}``.
    """

    def __init__(self, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir)

    def _path(self, prefix: str, form_id: str) -> Path:
        return self.root_dir / f"{prefix}{form_id}.json"

    def _write(self, path: Path, data: Dict[str, Any]) -> None:
        try:
            self.root_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write {path.name}: {e}")

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {path.name}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _remove(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to remove {path.name}: {e}")

    def save_values(self, form_id: str, values: Dict[str, Any]) -> None:
        self._write(self._path(VALUES_PREFIX, form_id), values)

    def load_values(self, form_id: str) -> Dict[str, Any]:
        return self._read(self._path(VALUES_PREFIX, form_id))

    def save_ratings(self, form_id: str, ratings: Dict[str, Any]) -> None:
        self._write(self._path(RATINGS_PREFIX, form_id), ratings)

    def load_ratings(self, form_id: str) -> Dict[str, Any]:
        return self._read(self._path(RATINGS_PREFIX, form_id))

    def clear(self, form_id: str) -> None:
        """Forget both answers and ratings for one form."""
        self._remove(self._path(VALUES_PREFIX, form_id))
        self._remove(self._path(RATINGS_PREFIX, form_id))

    def clear_all(self) -> None:
        if not self.root_dir.exists():
            return
        for prefix in (VALUES_PREFIX, RATINGS_PREFIX):
            for path in self.root_dir.glob(f"{prefix}*.json"):
                self._remove(path)
