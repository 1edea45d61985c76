import logging
from typing import List, Dict, Any

import requests

from config import RIGHTSIZE_API_URL_TEMPLATE, RIGHTSIZE_TIMEOUT_SECONDS, METRICS

logger = logging.getLogger(__name__)


class RightsizeError(Exception):
    pass


class RightsizeConnectionError(RightsizeError):
    """Transport failure: DNS, refused connection, timeout"""
    pass


class RightsizeQueryError(RightsizeError):
    """API answered with a non-2xx status"""
    pass


class RightsizeResponseError(RightsizeError):
    """API answered 2xx but the body is not a JSON array"""
    pass


def build_recommendation_url(region: str, metric: str) -> str:
    if metric not in METRICS:
        raise ValueError(f"metric must be one of {METRICS}, got {metric!r}")
    base = RIGHTSIZE_API_URL_TEMPLATE.format(region=region)
    return f"{base.rstrip('/')}/resource-recommendation/{metric}"


def query_recommendations(region: str, metric: str, application: str, namespace: str) -> List[Dict[str, Any]]:
    """
    GET the recommendation list for one (region, metric) pair.
    Returns the decoded JSON array. Raises a RightsizeError subclass on any failure.
    """
    url = build_recommendation_url(region, metric)
    params = {"app": application, "namespace": namespace}
    try:
        r = requests.get(url, params=params, timeout=RIGHTSIZE_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise RightsizeConnectionError(f"request to {url} failed: {e}")
    if not 200 <= r.status_code < 300:
        raise RightsizeQueryError(f"rightsize api returned status {r.status_code}: {r.text}")
    try:
        data = r.json()
    except ValueError as e:
        raise RightsizeResponseError(f"invalid JSON from {url}: {e}")
    if not isinstance(data, list):
        raise RightsizeResponseError(f"expected JSON array from {url}, got {type(data).__name__}")
    return data


def fetch(region: str, metric: str, application: str, namespace: str) -> List[Dict[str, Any]]:
    """Best-effort fetch: any failure is logged and treated as an empty list."""
    try:
        recs = query_recommendations(region, metric, application, namespace)
    except RightsizeError as e:
        logger.warning(f"[{region}] {metric} recommendations unavailable: {e}")
        return []
    logger.debug(f"[{region}] {metric}: {len(recs)} recommendation(s)")
    return recs
