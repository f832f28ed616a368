"""
Id Batching

Splits place references into groups the Graph API accepts in one
/?ids= call.
"""

from typing import Any, Iterable, List, Optional, Tuple

from ..config import ID_BATCH_LIMIT


def reference_id(ref: Any) -> Optional[str]:
    """Return the id of a place reference (bare id or {"id": ...} object)."""
    if isinstance(ref, dict):
        ref = ref.get("id")
    if ref is None or ref == "":
        return None
    return str(ref)


def batch_ids(
    refs: Iterable[Any],
    venues_count: int = 0,
    limit: int = ID_BATCH_LIMIT,
) -> Tuple[List[List[str]], int]:
    """
    Group place references into batches of at most `limit` ids.

    Args:
        refs: Place references, either id strings or objects with an "id"
        venues_count: Running count of references processed so far
        limit: Maximum ids per batch

    Returns:
        Tuple of (batches, updated venues_count). Every reference counts
        toward venues_count, including ones skipped for lacking an id.
    """
    if limit < 1:
        raise ValueError(f"Batch limit must be positive, got {limit}")

    batches = []
    current = []

    for ref in refs:
        venues_count += 1
        ref_id = reference_id(ref)
        if ref_id is None:
            continue
        current.append(ref_id)
        if len(current) >= limit:
            batches.append(current)
            current = []

    if current:
        batches.append(current)

    return batches, venues_count
