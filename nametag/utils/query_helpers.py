# nametag/utils/query_helpers.py
"""
Query Helper Functions

Parsing of request parameters shared by the nametag endpoints.
"""

import json
import re
from typing import Any, Iterable, List, Optional

_UNSAFE_NAME_CHARACTERS = re.compile(r"[^a-z0-9+]+", re.IGNORECASE)


def parse_legacy_shirt_ids(json_string: Optional[str]) -> List[int]:
    """
    Parse the legacy ``tShirtIDs`` query value, a JSON array of numbers.

    Entries that are not numbers are skipped; a value that is not valid JSON
    or not an array yields no ids.

    Examples:
        >>> parse_legacy_shirt_ids('[1, 2, "x", 3]')
        [1, 2, 3]
        >>> parse_legacy_shirt_ids("not json")
        []
    """
    if not json_string:
        return []

    try:
        parsed: Any = json.loads(json_string)
    except (json.JSONDecodeError, ValueError):
        return []

    if not isinstance(parsed, list):
        return []

    ids: List[int] = []
    for value in parsed:
        asset_id = _as_asset_id(value)
        if asset_id is not None:
            ids.append(asset_id)
    return ids


def collect_asset_ids(
    asset_ids: Optional[Iterable[int]], legacy_shirt_ids: Optional[str]
) -> List[int]:
    """Merge repeated ``assetId`` values with legacy ``tShirtIDs``, in that order."""
    ids = list(asset_ids or [])
    ids.extend(parse_legacy_shirt_ids(legacy_shirt_ids))
    return ids


def sanitise_name(text: str) -> str:
    """
    Collapse every run of characters outside ``[A-Za-z0-9+]`` into a single '+'.

    Examples:
        >>> sanitise_name("hello world!")
        'hello+world+'
    """
    return _UNSAFE_NAME_CHARACTERS.sub("+", text)


def _as_asset_id(value: Any) -> Optional[int]:
    # bool is an int subclass but true/false are not ids
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
