"""
Shared parsing utilities
"""
import json
import logging
import re
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_TRUE_VALUES = {"true", "1", "yes", "y"}
_FALSE_VALUES = {"false", "0", "no", "n", ""}


def safe_json_parse(json_string: Any, default_value: Any = None) -> Any:
    """
    Safely parse JSON string with error handling
    
    Args:
        json_string: String to parse or already parsed object
        default_value: Value to return on error
    
    Returns:
        Parsed JSON or default value
    """
    if json_string is None:
        return default_value
    
    try:
        return json.loads(json_string) if isinstance(json_string, (str, bytes)) else json_string
    except (ValueError, TypeError) as e:
        logger.warning("Error parsing JSON: %s", e)
        return default_value


def parse_id_list(raw: Any) -> List[str]:
    """
    Parse a persisted product id list

    Anything that is not a JSON array of strings reads as an empty list.
    """
    data = safe_json_parse(raw, default_value=[])
    if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
        if data:
            logger.warning("Ignoring malformed id list: %r", raw)
        return []
    return data


def parse_leading_int(value: Any) -> Optional[int]:
    """
    Parse the leading integer of a string ("12abc" -> 12, "abc" -> None)
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def id_seed(product_id: Any) -> int:
    """Numeric seed of a product id; non-numeric and zero ids fall back to 1"""
    return parse_leading_int(product_id) or 1


def parse_bool(value: Any) -> bool:
    """
    Parse a boolean cell from CSV input
    
    Raises:
        ValueError: if the value is not a recognised boolean spelling
    """
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in _TRUE_VALUES:
        return True
    if s in _FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def split_list(value: Any, sep: str = "|") -> List[str]:
    """Split a delimited CSV cell into a list of trimmed, non-empty strings"""
    if value is None:
        return []
    return [part.strip() for part in str(value).split(sep) if part.strip()]
