"""Orchestrator: fetch cpu/memory recommendations per region -> merge -> aggregate -> emit JSON.
Regions are independent; failures are contained per region and embedded in the payload.
"""
import argparse
import json
import logging
import os
import sys
import tempfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config import (
    setup_logging, validate_config, ConfigValidationError,
    RIGHTSIZE_REGIONS, RIGHTSIZE_MAX_WORKERS
)
from metrics import rightsize_client as rightsize
from normalize.recommendations import merge, PARSE_ERROR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationRequest:
    application: str
    namespace: str
    regions: Tuple[str, ...] = tuple(RIGHTSIZE_REGIONS)

    def __post_init__(self):
        if not self.application or not self.application.strip():
            raise ValueError("application is required")
        if not self.namespace or not self.namespace.strip():
            raise ValueError("namespace is required")
        # de-duplicated, first occurrence keeps its position
        regions = tuple(dict.fromkeys(r.strip() for r in self.regions if r and r.strip()))
        if not regions:
            raise ValueError("at least one region is required")
        object.__setattr__(self, 'regions', regions)


def _atomic_write(path: str, data: str) -> None:
    dirp = os.path.dirname(path) or '.'
    fd, tmp = tempfile.mkstemp(prefix='.tmp_rightsize_', dir=dirp)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(data)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)


def analyze_region(request: RecommendationRequest, region: str) -> Dict[str, Any]:
    """Fetch cpu and memory lists for one region concurrently and merge them."""
    try:
        with ThreadPoolExecutor(max_workers=2) as pool:
            cpu_future = pool.submit(rightsize.fetch, region, 'cpu', request.application, request.namespace)
            mem_future = pool.submit(rightsize.fetch, region, 'memory', request.application, request.namespace)
            cpu_recs = cpu_future.result()
            mem_recs = mem_future.result()
        return merge(cpu_recs, mem_recs)
    except Exception as e:
        logger.exception(f"[{region}] Analysis failed: {e}")
        return {'error': PARSE_ERROR}


def _describe(result: Dict[str, Any]) -> str:
    if set(result) == {'error'} and isinstance(result['error'], str):
        return result['error']
    return f"{len(result)} container(s)"


def run(request: RecommendationRequest) -> Dict[str, Any]:
    """Aggregate recommendations for every requested region.

    The returned dict always has exactly one entry per region in request order.
    """
    regions = list(request.regions)
    workers = RIGHTSIZE_MAX_WORKERS or len(regions)
    logger.info(
        f"Analyzing rightsize recommendations for {request.application} "
        f"in namespace {request.namespace} ({len(regions)} region(s))"
    )

    results: Dict[str, Dict[str, Any]] = {}
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [(region, pool.submit(analyze_region, request, region)) for region in regions]
        for region, future in futures:
            results[region] = future.result()
            logger.info(f"[{region}] {_describe(results[region])}")

    return {
        'app': request.application,
        'namespace': request.namespace,
        'regions': {region: results[region] for region in regions},
    }


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="rightsize",
        description="Fetch CPU/memory recommendations from the Rightsize API across regions",
    )
    parser.add_argument("app", help="Application name, e.g. temporal-ts-general-worker")
    parser.add_argument("namespace", help="Kubernetes namespace, e.g. app-temporal")
    parser.add_argument(
        "--regions",
        default=",".join(RIGHTSIZE_REGIONS),
        help="Comma-separated region codes (default: %(default)s)",
    )
    parser.add_argument("--output", help="Also write the JSON result to this file")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: %(default)s)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    setup_logging()

    try:
        validate_config()
    except ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        request = RecommendationRequest(
            application=args.app,
            namespace=args.namespace,
            regions=tuple(args.regions.split(',')),
        )
    except ValueError as e:
        logger.error(f"Invalid request: {e}")
        return 1

    out = run(request)
    payload = json.dumps(out, indent=args.indent)

    if args.output:
        try:
            _atomic_write(args.output, payload)
            logger.info(f"Wrote recommendations to {args.output}")
        except OSError as e:
            logger.warning(f"Failed to write {args.output}: {e}")

    sys.stdout.write(payload + "\n")
    sys.stdout.flush()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
