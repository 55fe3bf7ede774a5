"""File persistence for a serialized BloomFilter."""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from urlbf.bloom.bloom_filter import BloomFilter
from urlbf.errors import FilterStoreError

logger = logging.getLogger(__name__)


class FilterStore:
    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, bf: BloomFilter) -> None:
        """Write the filter atomically: temp file in the same directory, then rename."""
        payload = bf.serialize()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise FilterStoreError(f"cannot write filter state to {self.path}: {exc}") from exc
        logger.info("Saved filter state to %s (%d bytes)", self.path, len(payload))

    def load(self) -> Optional[BloomFilter]:
        """Return the stored filter, or None when no state file exists.

        Malformed content raises FilterFormatError.
        """
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise FilterStoreError(f"cannot read filter state from {self.path}: {exc}") from exc
        bf = BloomFilter.from_bytes(data)
        logger.info(
            "Loaded filter state from %s (m=%d k=%d truthiness=%.4f)",
            self.path, bf.bit_count, bf.hash_count, bf.truthiness,
        )
        return bf

    def delete(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise FilterStoreError(f"cannot delete {self.path}: {exc}") from exc
