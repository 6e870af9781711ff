# Conflict checker — which candidate relative paths already exist.
# Created: 2026-10-19

from __future__ import annotations

import logging
from pathlib import Path

from filedrop.storage.errors import ForbiddenPathError
from filedrop.storage.paths import resolve_within_root

logger = logging.getLogger(__name__)


def find_conflicts(root: Path, candidates: list) -> list[str]:
    """Return the candidates that already exist under *root*.

    Input order is preserved and duplicates are reported once. Candidates
    that are blank, not strings, or resolve outside the root are skipped
    without error. Nothing is cached: a later upload may still race with
    this answer.
    """
    conflicts: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        if not isinstance(candidate, str) or not candidate.strip() or candidate in seen:
            continue
        seen.add(candidate)
        try:
            target = resolve_within_root(root, candidate)
        except ForbiddenPathError:
            logger.debug("Ignoring conflict candidate outside storage: %r", candidate)
            continue
        if target == root.resolve():
            continue
        if target.exists():
            conflicts.append(candidate)
    return conflicts
