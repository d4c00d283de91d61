"""JSON file persistence for the hotlist collection.

The whole collection is rewritten on every save. There is no locking: a
single writer process is assumed. With ``atomic=True`` the document is written
to a sibling temp file and renamed over the target, so a crash mid-write
leaves the previous document intact.
"""

import json
import logging
import os
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path

from services.merger import Collection

logger = logging.getLogger(__name__)


class JsonFileStore:
    def __init__(self, path: str | Path, atomic: bool = False):
        self.path = Path(path)
        self.atomic = atomic

    def read(self) -> Collection:
        """Load the collection. Missing, corrupt or wrongly shaped files read as empty."""
        if not self.path.exists():
            return ()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Failed to read local data from %s: %s", self.path, e)
            return ()

        if not isinstance(data, list):
            logger.warning("Ignoring %s: expected a JSON array", self.path)
            return ()

        records = tuple(item for item in data if isinstance(item, dict))
        if len(records) != len(data):
            logger.warning("Dropped %d non-object entries from %s", len(data) - len(records), self.path)
        return records

    def write(self, collection: Sequence[dict]) -> bool:
        """Overwrite the backing file with the full collection. Returns False on failure."""
        text = json.dumps(list(collection), indent=2, ensure_ascii=False)
        try:
            if self.atomic:
                self._replace(text)
            else:
                self.path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.error("Failed to write data to %s: %s", self.path, e)
            return False

        logger.info("Wrote %d records to %s", len(collection), self.path)
        return True

    def _replace(self, text: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            if self.path.exists():
                shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
