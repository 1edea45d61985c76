#!/usr/bin/env python3
"""
HTTP API for Rightsize recommendation aggregation

Endpoints:
- /api/recommendations?app=<app>&namespace=<ns>[&regions=sg,my]: aggregated JSON
- /health: liveness probe
- /metrics: Prometheus-format self-monitoring counters
"""
import logging
import time
from datetime import datetime, timezone

from flask import Flask, jsonify, Response, request

from config import setup_logging, API_HOST, API_PORT
import orchestrator

setup_logging()
logger = logging.getLogger(__name__)

app = Flask(__name__)
# Keep region order as requested
app.json.sort_keys = False

# Metrics for observability
_metrics = {
    'requests_total': 0,
    'requests_by_endpoint': {},
    'errors_total': 0,
    'start_time': time.time()
}


def _record_request(endpoint: str):
    """Record request metrics"""
    _metrics['requests_total'] += 1
    _metrics['requests_by_endpoint'][endpoint] = _metrics['requests_by_endpoint'].get(endpoint, 0) + 1


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


@app.route('/api/recommendations')
def get_recommendations():
    """Aggregate recommendations for one application across regions"""
    _record_request('/api/recommendations')
    kwargs = {
        'application': request.args.get('app', ''),
        'namespace': request.args.get('namespace', ''),
    }
    regions = request.args.get('regions')
    if regions:
        kwargs['regions'] = tuple(regions.split(','))

    try:
        rec_request = orchestrator.RecommendationRequest(**kwargs)
    except ValueError as e:
        _metrics['errors_total'] += 1
        return jsonify({"error": str(e)}), 400

    return jsonify(orchestrator.run(rec_request))


@app.route('/health')
def health():
    """Health check endpoint for liveness probes"""
    _record_request('/health')
    return jsonify({
        "status": "healthy",
        "timestamp": _timestamp()
    })


@app.route('/metrics')
def metrics():
    """Prometheus metrics endpoint for self-monitoring"""
    _record_request('/metrics')
    uptime = time.time() - _metrics['start_time']

    lines = [
        "# HELP rightsize_api_requests_total Total number of HTTP requests",
        "# TYPE rightsize_api_requests_total counter",
        f"rightsize_api_requests_total {_metrics['requests_total']}",
        "",
        "# HELP rightsize_api_errors_total Total number of rejected requests",
        "# TYPE rightsize_api_errors_total counter",
        f"rightsize_api_errors_total {_metrics['errors_total']}",
        "",
        "# HELP rightsize_api_uptime_seconds API uptime in seconds",
        "# TYPE rightsize_api_uptime_seconds gauge",
        f"rightsize_api_uptime_seconds {uptime:.2f}",
        "",
        "# HELP rightsize_api_requests_by_endpoint Requests per endpoint",
        "# TYPE rightsize_api_requests_by_endpoint counter",
    ]
    for endpoint, count in _metrics['requests_by_endpoint'].items():
        lines.append(f'rightsize_api_requests_by_endpoint{{endpoint="{endpoint}"}} {count}')

    return Response('\n'.join(lines), mimetype='text/plain')


if __name__ == '__main__':
    logger.info(f"Rightsize API: http://{API_HOST}:{API_PORT}/api/recommendations")
    logger.info(f"Health: http://{API_HOST}:{API_PORT}/health")
    app.run(debug=False, host=API_HOST, port=API_PORT)
