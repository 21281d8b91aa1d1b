import math
from typing import Any, Callable, Sequence, TypeVar

from logdash.config.settings import get_settings
from logdash.models.page import SortOrder

T = TypeVar("T")


def sort_items(
    items: Sequence[T], key: Callable[[T], Any], order: SortOrder
) -> list[T]:
    # sorted() is stable in both directions, so equal keys keep their order
    return sorted(items, key=key, reverse=order == SortOrder.DESC)


def page_numbers(page: int, total_pages: int, window: int) -> list[int]:
    if total_pages <= 0:
        return []

    start = max(1, page - window // 2)
    end = min(total_pages, start + window - 1)
    if end - start + 1 < window:
        start = max(1, end - window + 1)

    return list(range(start, end + 1))


def paginate(items: Sequence[T], page: int, page_size: int) -> dict:
    settings = get_settings()

    if page < 1:
        raise ValueError("page must be >= 1")
    if not 1 <= page_size <= settings.max_page_size:
        raise ValueError(f"page_size must be between 1 and {settings.max_page_size}")

    total = len(items)
    total_pages = math.ceil(total / page_size)
    start = (page - 1) * page_size

    return {
        "items": list(items[start : start + page_size]),
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages,
        "page_numbers": page_numbers(page, total_pages, settings.page_window),
    }


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
