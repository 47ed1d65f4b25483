"""Common utility functions."""

from typing import Any, Iterable, Iterator, TypeVar

T = TypeVar("T")


def get_value(obj: Any, key: str) -> Any:
    """Get value from dict or object attribute."""
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def chunked(items: Iterable[T], size: int) -> Iterator[list[T]]:
    """Yield successive lists of at most `size` items."""
    if size < 1:
        raise ValueError("chunk size must be >= 1")
    batch: list[T] = []
    for item in items:
        batch.append(item)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp `value` into the closed range [lower, upper]."""
    return max(lower, min(value, upper))


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())
