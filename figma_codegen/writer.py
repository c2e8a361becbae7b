"""Idempotent file output: skip writes when content is byte-identical."""

import logging
import threading
from pathlib import Path
from typing import Optional, Union


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class IdempotentWriter:
    """Writes text / binary files only when their content changed.

    Parent directories are created on demand. Counters are guarded by a lock
    because asset downloads write from worker threads.
    """

    def __init__(self, root: Optional[PathLike] = None):
        self.root = Path(root) if root else None
        self.written: list[Path] = []
        self.skipped: list[Path] = []
        self._lock = threading.Lock()

    def write_text(self, path: PathLike, content: str) -> bool:
        return self.write_bytes(path, content.encode("utf-8"))

    def write_bytes(self, path: PathLike, payload: bytes) -> bool:
        target = Path(path)
        if target.exists() and target.read_bytes() == payload:
            logger.debug("Skipped (unchanged): %s", target.name)
            with self._lock:
                self.skipped.append(target)
            return False
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)
        logger.info("✓ Written: %s", self._display(target))
        with self._lock:
            self.written.append(target)
        return True

    def _display(self, target: Path) -> str:
        if self.root:
            try:
                return str(target.resolve().relative_to(self.root.resolve()))
            except ValueError:
                pass
        return str(target)


def write_if_changed(path: PathLike, content: str) -> bool:
    return IdempotentWriter().write_text(path, content)
