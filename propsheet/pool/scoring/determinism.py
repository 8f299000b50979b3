"""Determinism utilities for leaderboard computation.

Every recomputation over the same questions and submissions must yield the
same board, whatever order the store returned the records in:
1. Guarded percentages (no division errors)
2. Canonical total ordering of entries
3. Deterministic hashing for change detection
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional, Tuple

if TYPE_CHECKING:
    from .types import Leaderboard

PERCENT_PLACES = 6

# Submissions with no creation instant sort as the epoch
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def safe_percentage(numerator: int, denominator: int) -> float:
    """100 * numerator / denominator, or 0.0 when the denominator is 0."""
    if denominator <= 0:
        return 0.0
    return (numerator / denominator) * 100


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ranking_key(correct: int, submitted_at: Optional[datetime], submission_id: str) -> Tuple[int, datetime, str]:
    """Sort key: most correct first, then earliest submission, then id."""
    ts = to_utc(submitted_at) or _EPOCH
    return (-correct, ts, submission_id)


def _serialize_value(val: Any) -> Any:
    """Serialize a value for deterministic hashing."""
    if val is None:
        return None
    elif isinstance(val, datetime):
        return val.isoformat()
    elif isinstance(val, float):
        return round(val, PERCENT_PLACES)
    elif is_dataclass(val) and not isinstance(val, type):
        return _serialize_value(asdict(val))
    elif isinstance(val, dict):
        return {k: _serialize_value(v) for k, v in sorted(val.items())}
    elif isinstance(val, (list, tuple)):
        return [_serialize_value(v) for v in val]
    elif isinstance(val, (int, str, bool)):
        return val
    else:
        return str(val)


def compute_hash(data: Any) -> str:
    """Compute deterministic SHA256 hash of a value.

    The hash is computed from a canonical JSON representation
    with sorted keys and consistent formatting.
    """
    serialized = _serialize_value(data)
    canonical = json.dumps(serialized, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def compute_leaderboard_hash(board: "Leaderboard") -> str:
    return compute_hash({"entries": board.entries, "stats": board.stats})


__all__ = [
    "PERCENT_PLACES",
    "safe_percentage",
    "to_utc",
    "ranking_key",
    "compute_hash",
    "compute_leaderboard_hash",
]
