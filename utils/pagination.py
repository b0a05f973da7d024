"""Compact page-number windows for paginated tables"""
import math
from typing import List


def _floor_or_none(value):
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return int(math.floor(value))


def build_pagination_window(current_page, total_pages, max_visible: int = 5) -> List[int]:
    """Page numbers to show around the current page.

    (1, 26, 5) -> [1..5], (13, 26, 5) -> [11..15], (26, 26, 5) -> [22..26]
    """
    safe_total = _floor_or_none(total_pages)
    safe_total = max(0, safe_total) if safe_total is not None else 0
    if safe_total == 0:
        return []

    safe_max = max(1, _floor_or_none(max_visible) or 1)
    current = _floor_or_none(current_page)
    safe_current = min(max(1, current), safe_total) if current is not None else 1

    if safe_total <= safe_max:
        return list(range(1, safe_total + 1))

    start = safe_current - safe_max // 2
    end = start + safe_max - 1

    if start < 1:
        start = 1
        end = safe_max
    elif end > safe_total:
        end = safe_total
        start = safe_total - safe_max + 1

    return list(range(start, end + 1))


def page_count(total_rows: int, page_size: int) -> int:
    """Number of pages needed for total_rows"""
    if total_rows <= 0 or page_size <= 0:
        return 0
    return math.ceil(total_rows / page_size)
