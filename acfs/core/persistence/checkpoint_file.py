"""
Checkpoint file persistence — atomic read/write for CheckpointState.

The checkpoint lives in ``~/.acfs/state/checkpoint.json`` unless
ACFS_STATE_DIR points elsewhere. Writes go to a temp file in the same
directory and are renamed into place, so a crash mid-install never
leaves a half-written record.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from acfs.core.models.checkpoint import CheckpointState

logger = logging.getLogger(__name__)

STATE_DIR_ENV = "ACFS_STATE_DIR"
DEFAULT_STATE_DIR = Path("~/.acfs/state")
DEFAULT_CHECKPOINT_FILE = "checkpoint.json"


def default_checkpoint_path() -> Path:
    """Checkpoint location: $ACFS_STATE_DIR or ~/.acfs/state."""
    state_dir = os.environ.get(STATE_DIR_ENV)
    base = Path(state_dir) if state_dir else DEFAULT_STATE_DIR.expanduser()
    return base / DEFAULT_CHECKPOINT_FILE


def load_checkpoint(path: Path) -> CheckpointState:
    """Load the checkpoint from a JSON file.

    Args:
        path: Path to the checkpoint file.

    Returns:
        CheckpointState. A missing or unreadable file yields a fresh one.
    """
    if not path.is_file():
        logger.info("No checkpoint at %s, starting fresh", path)
        return CheckpointState()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        state = CheckpointState.model_validate(data)
    except json.JSONDecodeError as e:
        logger.warning("Corrupt checkpoint %s: %s, starting fresh", path, e)
        return CheckpointState()
    except (OSError, ValidationError) as e:
        logger.warning("Cannot load checkpoint from %s: %s, starting fresh", path, e)
        return CheckpointState()

    logger.debug("Loaded checkpoint from %s (%d completed)", path, len(state.completed))
    return state


def save_checkpoint(state: CheckpointState, path: Path) -> None:
    """Save the checkpoint atomically (write temp file, then rename).

    Args:
        state: The checkpoint to save.
        path: Target path.
    """
    state.touch()
    path.parent.mkdir(parents=True, exist_ok=True)

    content = json.dumps(state.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".checkpoint_", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to save checkpoint to %s: %s", path, e)
        raise

    logger.debug("Checkpoint saved to %s", path)


def clear_checkpoint(path: Path) -> bool:
    """Delete the checkpoint file. Returns whether one existed."""
    if not path.is_file():
        return False
    path.unlink()
    logger.info("Checkpoint %s removed", path)
    return True
