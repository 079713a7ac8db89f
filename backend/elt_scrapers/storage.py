"""Persistence for scrape run artifacts.

A full run is written as one JSON document ({"metadata", "content"}); a
single-site run as a bare JSON array of items. Each write replaces the
previous file in one step, so an interrupted run never leaves a partial
artifact behind.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Sequence

from .base import RunResult, ScrapedItem
from .exceptions import StorageError

logger = logging.getLogger(__name__)


def _write_json_atomic(data: Any, output_path: Path) -> Path:
    """Serialize to a temp file beside output_path, then rename over it."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=output_path.parent, prefix=f".{output_path.name}.", suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, output_path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
    return output_path


def save_run_result(result: RunResult, output_path: Path) -> Optional[Path]:
    """Write a full run artifact, overwriting any previous one.

    Args:
        result: Completed run
        output_path: Destination file

    Returns:
        The written path, or None when the write failed (logged, not raised)
    """
    try:
        path = _write_json_atomic(result.to_dict(), output_path)
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"❌ Error saving results to {output_path}: {e}")
        return None
    logger.info(f"📁 Results saved to: {path}")
    return path


def save_items(items: Sequence[ScrapedItem], output_path: Path) -> Optional[Path]:
    """Write a single-site artifact (JSON array of items).

    Returns:
        The written path, or None when the write failed (logged, not raised)
    """
    try:
        path = _write_json_atomic([item.to_dict() for item in items], output_path)
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"❌ Error saving results to {output_path}: {e}")
        return None
    logger.info(f"📁 Results saved to: {path}")
    return path


def load_run_result(input_path: Path) -> RunResult:
    """Read a full run artifact.

    Raises:
        StorageError: If the file is missing, unreadable or malformed
    """
    try:
        with open(input_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return RunResult.from_dict(data)
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Cannot load run artifact {input_path}: {e}") from e


def load_items(input_path: Path) -> List[ScrapedItem]:
    """Read a single-site artifact.

    Raises:
        StorageError: If the file is missing, unreadable or malformed
    """
    try:
        with open(input_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return [ScrapedItem.from_dict(item) for item in data]
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Cannot load items from {input_path}: {e}") from e
