"""Parameter helpers shared by the domain operations."""

from typing import List, Optional


def split_ids(ids: str) -> List[str]:
    """Split a comma-separated id or URI list, dropping blanks."""
    return [part.strip() for part in ids.split(",") if part.strip()]


def join_ids(ids: List[str]) -> str:
    return ",".join(ids)


def bound_limit(limit: Optional[int], default: int = 20, max_n: int = 50) -> int:
    """Return limit when it lies in [1, max_n], else default."""
    if limit is None or limit < 1 or limit > max_n:
        return default
    return limit


def require_max_items(items: List[str], max_n: int, what: str = "items") -> None:
    if not items:
        raise ValueError(f"At least one of {what} is required")
    if len(items) > max_n:
        raise ValueError(f"Maximum {max_n} {what} can be sent in one request (got {len(items)})")


def require_range(name: str, value: Optional[int], low: int, high: int) -> None:
    if value is not None and not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high} (got {value})")
