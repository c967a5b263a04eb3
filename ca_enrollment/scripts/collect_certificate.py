#!/usr/bin/env python3
"""Resume downloading a certificate that timed out during issuance."""

import argparse
import sys

from ca_enrollment.lib.errors import EnrollmentError
from ca_enrollment.lib.logging_config import LOGGER
from ca_enrollment.lib.orchestrator import IssuanceOrchestrator
from ca_enrollment.scripts.common import (
    EXIT_FAILED,
    EXIT_OK,
    EXIT_TIMED_OUT,
    add_common_arguments,
    build_client,
    build_config,
    load_credentials,
)


def main(argv: list[str] | None = None) -> int:
    """Poll the CA for an existing sslId.

    Returns:
        Exit code (0 issued, 1 failure, 2 still pending)
    """
    parser = argparse.ArgumentParser(description="Collect a previously enrolled certificate")
    add_common_arguments(parser)
    parser.add_argument("--ssl-id", type=int, required=True, help="sslId returned by enroll")
    parser.add_argument("--renew-id", default="", help="renewId returned by enroll")
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        credentials = load_credentials(args)
        orchestrator = IssuanceOrchestrator(config, build_client(config, credentials))

        result = orchestrator.resume(args.ssl_id, args.renew_id)
        if not result.is_issued:
            LOGGER.warning("Certificate %d still pending after %d seconds", result.ssl_id, result.elapsed)
            return EXIT_TIMED_OUT

        LOGGER.info("Certificate %d written to %s", result.ssl_id, orchestrator.artifacts.cert_path)
        return EXIT_OK

    except EnrollmentError as e:
        LOGGER.error("Certificate collection failed: %s", e)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
