"""Command-line entry point — configuration comes from environment variables."""

from __future__ import annotations

import json
import logging
import os
import signal

from ns_delegation.config import load_config
from ns_delegation.errors import ParameterError
from ns_delegation.runner import run

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOT_CONVERGED = 2

_REQUIRED_HELP = "Required: ACTION, BBL_STATE_DIR, GCP_DNS_SERVICE_ACCOUNT_KEY, GCP_DNS_ZONE_NAME, GCP_DNS_RECORD_SET_NAME"


def _raise_system_exit(signum, frame) -> None:
    # Unwind the stack so the key file is erased and any open transaction aborted.
    raise SystemExit(128 + signum)


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    _configure_logging()
    signal.signal(signal.SIGTERM, _raise_system_exit)

    try:
        config = load_config()
    except ParameterError as exc:
        logger.error("%s", exc)
        logger.error(_REQUIRED_HELP)
        return EXIT_FAILED

    result = run(config)
    logger.info("Result: %s", json.dumps(result.to_dict()))
    if not result.success:
        return EXIT_FAILED
    if result.converged is False:
        return EXIT_NOT_CONVERGED
    return EXIT_OK
