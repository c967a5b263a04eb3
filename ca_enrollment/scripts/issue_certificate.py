#!/usr/bin/env python3
"""Issue a certificate: generate key and CSR, enroll, and download."""

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
    """Run a full issuance for one domain.

    Returns:
        Exit code (0 issued, 1 failure, 2 timed out with sslId saved)
    """
    parser = argparse.ArgumentParser(description="Issue certificate through the CA REST API")
    add_common_arguments(parser)
    parser.add_argument("--country", default="", help="Subject country (C)")
    parser.add_argument("--province", default="", help="Subject state or province (ST)")
    parser.add_argument("--locality", default="", help="Subject locality (L)")
    parser.add_argument("--organization", default="", help="Subject organization (O)")
    parser.add_argument("--org-unit", default="", help="Subject organizational unit (OU)")
    parser.add_argument("--email-address", default="", help="Subject emailAddress")
    parser.add_argument("--subject-alt-names", default="", help="Subject alternative name")
    parser.add_argument("--cert-type", type=int, default=0, help="CA certificate profile ID")
    parser.add_argument("--num-servers", type=int, default=1, help="Number of servers")
    parser.add_argument("--server-type", type=int, default=-1, help="CA server type")
    parser.add_argument("--term", type=int, default=365, help="Validity term in days")
    parser.add_argument("--comments", default="", help="Enrollment comments")
    parser.add_argument("--external-requester", default="", help="External requester email")
    parser.add_argument(
        "--key-algorithm",
        default="",
        choices=["", "P224", "P256", "P384", "P521"],
        help="Elliptic curve for the key; empty selects RSA",
    )
    parser.add_argument("--rsa-bits", type=int, default=2048, help="RSA key size")
    parser.add_argument("--previous-domain", help="Remove artifacts of a previously used domain")
    args = parser.parse_args(argv)

    try:
        config = build_config(args, require_org_id=True)
        credentials = load_credentials(args)
        orchestrator = IssuanceOrchestrator(config, build_client(config, credentials))

        LOGGER.info("Issuing certificate for: %s", config.domain)
        result = orchestrator.issue(previous_domain=args.previous_domain)

        if not result.is_issued:
            LOGGER.warning("Certificate not issued yet:")
            LOGGER.warning("  sslId: %d", result.ssl_id)
            LOGGER.warning("  renewId: %s", result.renew_id)
            LOGGER.warning("Next: run collect_certificate.py --ssl-id %d", result.ssl_id)
            return EXIT_TIMED_OUT

        LOGGER.info("Certificate issued:")
        LOGGER.info("  sslId: %d", result.ssl_id)
        LOGGER.info("  renewId: %s", result.renew_id)
        LOGGER.info("  Key: %s", orchestrator.artifacts.key_path)
        LOGGER.info("  Cert: %s", orchestrator.artifacts.cert_path)
        return EXIT_OK

    except EnrollmentError as e:
        LOGGER.error("Certificate issuance failed: %s", e)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
