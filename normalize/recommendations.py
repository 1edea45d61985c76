"""Normalization and per-region merge of Rightsize recommendation lists."""
import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)

NO_DATA_ERROR = "No data available"
PARSE_ERROR = "Failed to parse recommendations"


def _parse_number(text: str) -> Optional[Union[int, float]]:
    text = text.strip()
    if text.lower() == "null":
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def normalize_value(value: Any) -> Optional[Union[int, float]]:
    """Map the API's value to a number, or None for null, "null" and anything unparseable.

    JSON numbers pass through unchanged; numeric strings become int when
    integral, float otherwise. Values outside the float range are absent.
    """
    if isinstance(value, str):
        value = _parse_number(value)
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        if not math.isfinite(float(value)):
            return None
    except OverflowError:
        return None
    return value


def normalize_metric(entry: Optional[Mapping[str, Any]]) -> Dict[str, Optional[Union[int, float]]]:
    if entry is None:
        return {"requests": None, "limits": None}
    return {
        "requests": normalize_value(entry.get("requests")),
        "limits": normalize_value(entry.get("limits")),
    }


def _index_by_container(recs: List[Mapping[str, Any]]) -> Dict[str, Mapping[str, Any]]:
    # first-seen wins for duplicated containers
    index: Dict[str, Mapping[str, Any]] = {}
    for rec in recs:
        if not isinstance(rec, Mapping):
            raise TypeError(f"recommendation entry must be an object, got {type(rec).__name__}")
        name = rec.get("container")
        if not isinstance(name, str):
            raise TypeError(f"container name must be a string, got {name!r}")
        index.setdefault(name, rec)
    return index


def merge(cpu_list: List[Mapping[str, Any]], mem_list: List[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Join CPU and memory recommendation lists on container name.

    Returns {container: {"cpu": {...}, "memory": {...}}} or an {"error": ...}
    marker. A container missing from one list gets None for that metric's
    requests and limits. Never raises.
    """
    try:
        if not cpu_list and not mem_list:
            return {"error": NO_DATA_ERROR}
        if not isinstance(cpu_list, list) or not isinstance(mem_list, list):
            raise TypeError("recommendation lists must be JSON arrays")

        cpu_by_name = _index_by_container(cpu_list)
        mem_by_name = _index_by_container(mem_list)

        containers: Dict[str, Any] = {}
        for name in list(cpu_by_name) + list(mem_by_name):
            if name in containers:
                continue
            containers[name] = {
                "cpu": normalize_metric(cpu_by_name.get(name)),
                "memory": normalize_metric(mem_by_name.get(name)),
            }
        return containers
    except (TypeError, AttributeError) as e:
        logger.warning(f"Could not merge recommendations: {e}")
        return {"error": PARSE_ERROR}
