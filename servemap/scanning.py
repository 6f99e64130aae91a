from __future__ import annotations

import logging
import stat
from pathlib import Path
from typing import Iterator, List, Set

from werkzeug.exceptions import BadRequest, NotFound

from .models import SaveCandidate

logger = logging.getLogger(__name__)

SAVE_SUFFIX = ".sav"
FORBIDDEN_NAME_CHARS = ("/", "\\", ".")

def validate_name(name: str) -> None:
    if not name or any(c in name for c in FORBIDDEN_NAME_CHARS):
        raise BadRequest("Invalid characters in name")

def save_pattern(save_dir: Path, name: str) -> str:
    return str(Path(save_dir) / f"{name}*{SAVE_SUFFIX}")

def _glob(save_dir: Path, pattern: str) -> List[Path]:
    try:
        return sorted(Path(save_dir).glob(pattern))
    except ValueError as e:
        # pathlib may already prefix its message
        detail = str(e).removeprefix("Invalid pattern: ")
        raise BadRequest(f"Invalid pattern: {detail}") from e

def iter_candidates(save_dir: Path, pattern: str) -> Iterator[SaveCandidate]:
    """Yield matching regular files inside save_dir with their mtime.

    Entries that vanish or can't be stat'ed mid-scan are skipped, as are
    entries (e.g. symlinks) that resolve outside the save directory.
    """
    root = Path(save_dir).resolve()
    for p in _glob(save_dir, pattern):
        try:
            if not p.resolve().is_relative_to(root):
                logger.warning("Skipping %s: resolves outside %s", p, root)
                continue
            st = p.stat()
            if not stat.S_ISREG(st.st_mode):
                continue
        except OSError as e:
            logger.debug("Skipping unreadable entry %s: %s", p, e)
            continue
        yield SaveCandidate(path=p, modified_ns=st.st_mtime_ns)

def find_latest_save(name: str, save_dir: Path) -> Path:
    """Return the most recently modified ``<save_dir>/<name>*.sav``.

    Raises BadRequest for names with path characters and NotFound when
    nothing matches. On equal mtimes the lexicographically smallest path wins.
    """
    validate_name(name)
    pattern = save_pattern(save_dir, name)

    best = None
    for c in iter_candidates(save_dir, f"{name}*{SAVE_SUFFIX}"):
        if best is None or (-c.modified_ns, str(c.path)) < (-best.modified_ns, str(best.path)):
            best = c

    if best is None:
        msg = f"No matching files found for pattern: {pattern}"
        logger.info(msg)
        raise NotFound(msg)

    logger.info("Serving file: %s", best.path)
    return best.path

def save_name_for(filename: str) -> str:
    """'Noobville_autosave_0.sav' -> 'Noobville', 'Bar.sav' -> 'Bar'."""
    stem = filename[:-len(SAVE_SUFFIX)] if filename.endswith(SAVE_SUFFIX) else filename
    return stem.split("_", 1)[0]

def list_save_names(save_dir: Path) -> Set[str]:
    names: Set[str] = set()
    for c in iter_candidates(save_dir, f"*{SAVE_SUFFIX}"):
        n = save_name_for(c.path.name)
        if not n or any(ch in n for ch in FORBIDDEN_NAME_CHARS):
            logger.debug("Skipping %s: no servable save name", c.path.name)
            continue
        names.add(n)
    return names
