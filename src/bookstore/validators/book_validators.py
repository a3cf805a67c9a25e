from typing import Iterable

from bookstore.exceptions.base import InvalidFilterError
from bookstore.models.book import VALID_GENRES

ALLOWED_FILTER_KEYS = frozenset({"name", "genre"})


def group_query_items(items: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    """
    Collapse `(key, value)` pairs into `key -> [values]`, keeping value order.
    """
    grouped: dict[str, list[str]] = {}
    for key, value in items:
        grouped.setdefault(key, []).append(value)
    return grouped


def parse_book_filter(items: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    """
    Validate the query string of GET /books before the repository is called.

    Accepts zero, one or both of `name` and `genre`. Every `genre` value must be
    an integer in VALID_GENRES.

    Raises:
        InvalidFilterError: unsupported key or bad genre value
    """
    filters = group_query_items(items)

    unknown = sorted(set(filters) - ALLOWED_FILTER_KEYS)
    if unknown:
        raise InvalidFilterError(f"Unsupported filter key(s): {', '.join(unknown)}", fields=unknown)

    for raw in filters.get("genre", []):
        try:
            genre = int(raw)
        except ValueError as exc:
            raise InvalidFilterError(f"Genre is not an integer: {raw!r}", fields=["genre"]) from exc
        if genre not in VALID_GENRES:
            raise InvalidFilterError(f"Genre out of range: {genre}", fields=["genre"])

    return filters
