"""
Test fixtures and configuration for pytest
"""
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def cpu_recommendations():
    """CPU recommendation list as returned by the Rightsize API"""
    return [
        {"container": "app", "requests": 0.61, "limits": "null"}
    ]


@pytest.fixture
def memory_recommendations():
    """Memory recommendation list as returned by the Rightsize API"""
    return [
        {"container": "app", "requests": 1692, "limits": 1946},
        {"container": "istio-proxy", "requests": 200, "limits": "null"}
    ]


@pytest.fixture
def fake_fetch():
    """Build a fetch replacement from a {(region, metric): list} table.

    Unknown (region, metric) pairs return an empty list, like a failed call.
    Every call is recorded in `fetch.calls`.
    """
    def build(table=None):
        if table is None:
            table = {}

        def fetch(region, metric, application, namespace):
            fetch.calls.append((region, metric, application, namespace))
            return list(table.get((region, metric), []))

        fetch.calls = []
        return fetch

    return build
