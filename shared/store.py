"""
JSON file record store, one per replica.

A store holds the full collection of one service instance. ``load`` returns
the whole list and ``save`` replaces it; replicas never share a file.
"""

import json
import os
import shutil
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import aiofiles

from .logging import get_logger


class RecordStore:
    """Durable collection of JSON records backed by a single file."""

    def __init__(self, path: Union[str, Path], name: str = "records"):
        self.path = Path(path)
        self.name = name
        self.logger = get_logger(f"{name}.store")
        self._generation = 0

    @property
    def exists(self) -> bool:
        return self.path.exists()

    async def load(self) -> List[Dict[str, Any]]:
        """Return the full collection, or an empty one if the file is unusable."""
        try:
            async with aiofiles.open(self.path, mode="r", encoding="utf-8") as handle:
                raw = await handle.read()
        except FileNotFoundError:
            self.logger.warning("Store file missing, starting empty", path=str(self.path))
            return []
        except OSError as exc:
            self.logger.error("Error loading store", path=str(self.path), error=str(exc))
            return []

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as exc:
            self.logger.error("Store file is not valid JSON", path=str(self.path), error=str(exc))
            return []

        if not isinstance(records, list):
            self.logger.error("Store file does not hold a list", path=str(self.path))
            return []
        return records

    async def save(self, records: List[Dict[str, Any]]) -> None:
        """Persist the full collection.

        Written to a sibling temp file and renamed over the store, so readers
        see either the previous or the new collection.

        The collection is serialized before the first await. When saves
        overlap, only the most recently started one may rename; an older
        save that finishes late drops its temp file instead of replacing a
        newer collection on disk.
        """
        self._generation += 1
        generation = self._generation
        payload = json.dumps(records, indent=2)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex}.tmp")
        async with aiofiles.open(tmp_path, mode="w", encoding="utf-8") as handle:
            await handle.write(payload)

        if generation != self._generation:
            os.remove(tmp_path)
            self.logger.debug("Superseded store save dropped", path=str(self.path), records=len(records))
            return
        os.replace(tmp_path, self.path)
        self.logger.debug("Store saved", path=str(self.path), records=len(records))

    def seed_if_missing(self, seed_path: Optional[Union[str, Path]]) -> bool:
        """Initialise the store from a seed file on first run.

        Returns True when the store was created, False when it already
        existed or no seed was given.
        """
        if self.exists:
            self.logger.info("Store already exists", path=str(self.path))
            return False
        if not seed_path:
            return False

        self.path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(seed_path, self.path)
        self.logger.info("Store initialized from seed", path=str(self.path), seed=str(seed_path))
        return True
