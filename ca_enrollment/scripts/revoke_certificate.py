#!/usr/bin/env python3
"""Revoke an issued certificate and remove its local artifacts."""

import argparse
import sys

from ca_enrollment.lib.errors import EnrollmentError
from ca_enrollment.lib.logging_config import LOGGER
from ca_enrollment.lib.orchestrator import IssuanceOrchestrator
from ca_enrollment.scripts.common import (
    EXIT_FAILED,
    EXIT_OK,
    add_common_arguments,
    build_client,
    build_config,
    load_credentials,
)


def main(argv: list[str] | None = None) -> int:
    """Revoke certificate by sslId.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(description="Revoke certificate through the CA REST API")
    add_common_arguments(parser)
    parser.add_argument("--ssl-id", type=int, required=True, help="sslId of the certificate")
    parser.add_argument(
        "--reason",
        default="Terraform destroy",
        help="Revocation reason (default: Terraform destroy)",
    )
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        credentials = load_credentials(args)
        orchestrator = IssuanceOrchestrator(config, build_client(config, credentials))

        orchestrator.revoke(args.ssl_id, args.reason)
        LOGGER.info("Certificate %d revoked for %s", args.ssl_id, config.domain)
        return EXIT_OK

    except EnrollmentError as e:
        LOGGER.error("Certificate revocation failed: %s", e)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
