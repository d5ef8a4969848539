"""
Command-line entry point for the latency dashboard server.

Runs the load/normalize/aggregate pipeline once so that a missing or
malformed results file stops the process before the socket is opened, then
serves the dashboard with uvicorn in the foreground until interrupted.

Usage:
    python -m latency_api --data data/output.csv --port 8050
    latency-dashboard --unit-policy table --debug
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from latency.errors import FileError, LatencyDataError
from latency.pipeline import run_pipeline
from latency.settings import EMPTY_GROUP_POLICIES, LOG_LEVELS, UNIT_POLICIES, load_settings

logger = logging.getLogger(__name__)

SUCCESS = 0
FILE_ERROR = 2
PARSE_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="latency-dashboard",
        description="Serve a bar chart of average solve time per model from a benchmark CSV.",
    )
    parser.add_argument("--data", dest="data_path", default=None, help="Path to the results CSV.")
    parser.add_argument("--host", default=None, help="Interface to bind.")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on.")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable auto-reload.")
    parser.add_argument("--unit-policy", dest="unit_policy", choices=UNIT_POLICIES, default=None)
    parser.add_argument("--empty-groups", dest="empty_groups", choices=EMPTY_GROUP_POLICIES, default=None)
    parser.add_argument("--log-level", dest="log_level", choices=LOG_LEVELS, default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(**vars(args))
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        aggregate = run_pipeline(
            settings.data_path,
            unit_policy=settings.unit_policy,
            empty_groups=settings.empty_groups,
        )
    except FileError as exc:
        logger.error("%s", exc)
        return FILE_ERROR
    except LatencyDataError as exc:
        logger.error("%s", exc)
        return PARSE_ERROR

    logger.info(
        "Serving %d model(s) from %s on http://%s:%d",
        len(aggregate),
        settings.data_path,
        settings.host,
        settings.port,
    )

    import uvicorn

    if settings.debug:
        # reload needs an import string; the reloaded app rebuilds settings from LATENCY_*
        os.environ.update(
            {
                "LATENCY_DATA_PATH": str(settings.data_path),
                "LATENCY_UNIT_POLICY": settings.unit_policy,
                "LATENCY_EMPTY_GROUPS": settings.empty_groups,
            }
        )
        uvicorn.run("latency_api.main:app", host=settings.host, port=settings.port, reload=True, log_level=settings.log_level.lower())
    else:
        from latency_api.main import create_app

        uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return SUCCESS


if __name__ == "__main__":
    sys.exit(main())
