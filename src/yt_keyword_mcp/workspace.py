"""Per-request scratch directories."""

from __future__ import annotations

import logging
import shutil
import tempfile
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)


@contextmanager
def scratch_namespace(root: str | Path | None = None) -> Iterator[Path]:
    """Create a unique scratch directory and remove it on every exit path."""
    if root is not None:
        Path(root).mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix=f"ytkw-{uuid.uuid4().hex[:12]}-", dir=root))
    logger.debug("Created scratch namespace %s", path)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed scratch namespace %s", path)
