"""
Tests for Rightsize API client module
"""
import pytest
from unittest.mock import patch
import requests

from metrics.rightsize_client import (
    RightsizeError,
    RightsizeConnectionError,
    RightsizeQueryError,
    RightsizeResponseError,
    build_recommendation_url,
    query_recommendations,
    fetch,
)


class TestRightsizeError:
    """Tests for RightsizeError exception classes"""

    def test_rightsize_error_is_exception(self):
        """RightsizeError should be an Exception"""
        assert issubclass(RightsizeError, Exception)

    @pytest.mark.parametrize("cls", [RightsizeConnectionError, RightsizeQueryError, RightsizeResponseError])
    def test_subclasses_inherit(self, cls):
        """All client errors should inherit from RightsizeError"""
        assert issubclass(cls, RightsizeError)


class TestBuildUrl:
    """Tests for build_recommendation_url"""

    def test_default_host_per_region(self):
        """Region code is substituted into the host"""
        url = build_recommendation_url('co.th', 'cpu')
        assert url == 'https://rightsize-api.production.stashaway.co.th/resource-recommendation/cpu'

    def test_custom_template(self, monkeypatch):
        """Template can be overridden"""
        monkeypatch.setattr('metrics.rightsize_client.RIGHTSIZE_API_URL_TEMPLATE', 'http://localhost:8000/{region}/')
        assert build_recommendation_url('sg', 'memory') == 'http://localhost:8000/sg/resource-recommendation/memory'

    def test_unknown_metric_rejected(self):
        """Only cpu and memory are valid metrics"""
        with pytest.raises(ValueError):
            build_recommendation_url('sg', 'disk')


class TestQueryRecommendations:
    """Tests for query_recommendations"""

    @patch('metrics.rightsize_client.requests.get')
    def test_successful_query(self, mock_get, cpu_recommendations):
        """Should return the decoded array"""
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.return_value = cpu_recommendations

        result = query_recommendations('sg', 'cpu', 'myapp', 'app-ns')

        assert result == cpu_recommendations

    @patch('metrics.rightsize_client.requests.get')
    def test_query_params(self, mock_get):
        """Should pass app and namespace as query params with a timeout"""
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.return_value = []

        query_recommendations('my', 'memory', 'myapp', 'app-ns')

        args, kwargs = mock_get.call_args
        assert args[0] == 'https://rightsize-api.production.stashaway.my/resource-recommendation/memory'
        assert kwargs['params'] == {'app': 'myapp', 'namespace': 'app-ns'}
        assert kwargs['timeout'] > 0

    @patch('metrics.rightsize_client.requests.get')
    def test_non_2xx_raises(self, mock_get):
        """Should raise RightsizeQueryError on non-2xx response"""
        mock_get.return_value.status_code = 503
        mock_get.return_value.text = "Service Unavailable"

        with pytest.raises(RightsizeQueryError):
            query_recommendations('sg', 'cpu', 'myapp', 'app-ns')

    @patch('metrics.rightsize_client.requests.get')
    def test_connection_error_raises(self, mock_get):
        """Should raise RightsizeConnectionError on transport failure, without retrying"""
        mock_get.side_effect = requests.exceptions.ConnectionError("Connection refused")

        with pytest.raises(RightsizeConnectionError):
            query_recommendations('sg', 'cpu', 'myapp', 'app-ns')

        assert mock_get.call_count == 1

    @patch('metrics.rightsize_client.requests.get')
    def test_invalid_json_raises(self, mock_get):
        """Should raise RightsizeResponseError on undecodable body"""
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.side_effect = ValueError("Expecting value")

        with pytest.raises(RightsizeResponseError):
            query_recommendations('sg', 'cpu', 'myapp', 'app-ns')

    @patch('metrics.rightsize_client.requests.get')
    def test_non_array_body_raises(self, mock_get):
        """Should raise RightsizeResponseError when body is not a list"""
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.return_value = {"message": "not found"}

        with pytest.raises(RightsizeResponseError):
            query_recommendations('sg', 'cpu', 'myapp', 'app-ns')


class TestFetch:
    """Tests for best-effort fetch"""

    @patch('metrics.rightsize_client.requests.get')
    def test_returns_list_on_success(self, mock_get, memory_recommendations):
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.return_value = memory_recommendations

        assert fetch('sg', 'memory', 'myapp', 'app-ns') == memory_recommendations

    @patch('metrics.rightsize_client.requests.get')
    def test_timeout_returns_empty(self, mock_get, caplog):
        """Timeouts degrade to an empty list and are logged"""
        import logging
        mock_get.side_effect = requests.exceptions.Timeout("timed out")

        with caplog.at_level(logging.WARNING):
            assert fetch('hk', 'cpu', 'myapp', 'app-ns') == []
        assert '[hk] cpu' in caplog.text

    @patch('metrics.rightsize_client.requests.get')
    def test_http_error_returns_empty(self, mock_get):
        mock_get.return_value.status_code = 500
        mock_get.return_value.text = "boom"

        assert fetch('sg', 'cpu', 'myapp', 'app-ns') == []
