# utils/query_utils.py

import re
from typing import Any, Dict, Tuple
import config
from models.employee import SORTABLE_FIELDS
from utils.errors import EmployeeValidationError

# Largest skip value MongoDB accepts (BSON int64)
MAX_SKIP = 2 ** 63 - 1

def build_search_filter(search: str) -> Dict[str, Any]:
    """
    Builds the MongoDB filter for the employee list search box.

    The search text is split on whitespace and a record matches when its name
    contains ANY of the words, case-insensitively. Blank search matches all.
    """
    words = (search or "").split()
    if not words:
        return {}

    return {
        "$or": [
            {"name": {"$regex": re.escape(word), "$options": "i"}}
            for word in words
        ]
    }

def build_active_filter(search_filter: Dict[str, Any]) -> Dict[str, Any]:
    return {**search_filter, "active": True}

def build_sort(sort_field: str, sort_order: str) -> Tuple[str, int]:
    """
    Single-field sort spec for cursor.sort(). "asc" (the default when blank)
    sorts ascending, any other order sorts descending.
    """
    field = (sort_field or "createDate").strip()
    if field not in SORTABLE_FIELDS:
        raise EmployeeValidationError(
            f"Invalid sort field: {field}. Allowed values: {', '.join(SORTABLE_FIELDS)}"
        )
    direction = 1 if (sort_order or "asc").strip().lower() == "asc" else -1
    return field, direction

def clamp_pagination(page: int, limit: int) -> Tuple[int, int]:
    """
    page below 1 becomes 1, limit below 1 becomes the default page size and
    limit above MAX_PAGE_LIMIT is capped. page is capped so the skip offset
    still fits in a BSON int64; such a page is simply empty.
    """
    if limit < 1:
        limit = config.DEFAULT_PAGE_LIMIT
    if limit > config.MAX_PAGE_LIMIT:
        limit = config.MAX_PAGE_LIMIT
    if page < 1:
        page = 1
    max_page = MAX_SKIP // limit + 1
    if page > max_page:
        page = max_page
    return page, limit

def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit
