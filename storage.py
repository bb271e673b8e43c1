# storage.py
#
# Description:
# JSON file backend for the todo list. The whole collection is read and
# written as a single array; there is no partial update.
#

import json
import os
import tempfile
from typing import Any, Dict, List

import structlog

logger = structlog.get_logger(__name__)


class JsonStorage:
    """Loads and saves a list of records from a JSON file."""

    def __init__(self, path: str):
        """
        Initializes the storage and creates an empty file if needed.

        Args:
            path: Location of the JSON file holding the records.
        """
        self.path = path
        if not os.path.exists(self.path):
            logger.info("storage_created", path=self.path)
            self.save([])

    def load(self) -> List[Dict[str, Any]]:
        """
        Reads every record from disk.

        Raises:
            OSError: If the file cannot be read.
            json.JSONDecodeError: If the file does not hold valid JSON.
        """
        with open(self.path, "r", encoding="utf-8") as f:
            records = json.load(f)
        logger.debug("storage_loaded", path=self.path, count=len(records))
        return records

    def save(self, records: List[Dict[str, Any]]) -> None:
        """Overwrites the file with the given records."""
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".todos-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, ensure_ascii=False, separators=(",", ":"))
            os.replace(tmp_path, self.path)
        except BaseException:
            # Don't leave the half-written temp file behind
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug("storage_saved", path=self.path, count=len(records))
