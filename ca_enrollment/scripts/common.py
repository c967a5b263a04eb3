"""Argument and configuration helpers shared by the enrollment scripts."""

import argparse
from pathlib import Path

from ca_enrollment.lib.ca_client import CAClient
from ca_enrollment.lib.config import (
    CACredentials,
    EnrollmentConfig,
    SubjectAttributes,
    credentials_from_env,
    resolve_param,
)
from ca_enrollment.lib.errors import ConfigurationError
from ca_enrollment.lib.ssm_client import SSMClient

ENV_BASE_URL = "SECTIGO_CM_BASE_URL"
ENV_ORG_ID = "SECTIGO_CM_ORG_ID"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_TIMED_OUT = 2


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add domain, output path, CA endpoint and credential arguments."""
    parser.add_argument("--domain", required=True, help="Domain name (used as CN and file prefix)")
    parser.add_argument(
        "--cert-file-path",
        type=Path,
        default=Path("."),
        help="Directory for {domain}.key/.csr/.crt/.log (default: current directory)",
    )
    parser.add_argument("--base-url", help=f"CA API base URL (default: ${ENV_BASE_URL})")
    parser.add_argument("--org-id", help=f"CA organization ID (default: ${ENV_ORG_ID})")
    parser.add_argument("--username", help="CA login (default: $SECTIGO_CM_USER)")
    parser.add_argument("--customer-uri", help="CA customer URI (default: $SECTIGO_CM_URI)")
    parser.add_argument(
        "--ssm-project",
        help="Read credentials from SSM under /{project}/{account}/sectigo instead of env",
    )
    parser.add_argument("--ssm-account", default="sandbox", help="SSM account segment")
    parser.add_argument("--region", default="eu-west-2", help="AWS region for SSM")
    parser.add_argument("--poll-interval", type=int, default=30, help="Seconds between downloads")
    parser.add_argument("--max-timeout", type=int, default=600, help="Seconds before giving up")
    parser.add_argument("--request-timeout", type=int, default=30, help="HTTP timeout in seconds")


def load_credentials(args: argparse.Namespace) -> CACredentials:
    """Resolve credentials from SSM when --ssm-project is set, else args/env.

    The password is never taken from the command line.
    """
    if args.ssm_project:
        return SSMClient(region=args.region).get_ca_credentials(args.ssm_project, args.ssm_account)
    return credentials_from_env(username=args.username, customer_uri=args.customer_uri)


def _resolve_org_id(value: str | None) -> int:
    raw = resolve_param(value, ENV_ORG_ID, "org_id")
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"org_id must be an integer, got {raw!r}") from e


def build_config(args: argparse.Namespace, require_org_id: bool = False) -> EnrollmentConfig:
    """Build EnrollmentConfig from parsed arguments and environment.

    The organization ID is only resolved when require_org_id is set;
    otherwise it stays None.
    """
    return EnrollmentConfig(
        domain=args.domain,
        cert_file_path=str(args.cert_file_path),
        base_url=resolve_param(args.base_url, ENV_BASE_URL, "base_url"),
        org_id=_resolve_org_id(args.org_id) if require_org_id else None,
        subject=SubjectAttributes(
            common_name=args.domain,
            country=getattr(args, "country", ""),
            province=getattr(args, "province", ""),
            locality=getattr(args, "locality", ""),
            organization=getattr(args, "organization", ""),
            organizational_unit=getattr(args, "org_unit", ""),
            email_address=getattr(args, "email_address", ""),
        ),
        cert_type=getattr(args, "cert_type", 0),
        number_servers=getattr(args, "num_servers", 1),
        server_type=getattr(args, "server_type", -1),
        term=getattr(args, "term", 365),
        comments=getattr(args, "comments", ""),
        external_requester=getattr(args, "external_requester", ""),
        subject_alt_names=getattr(args, "subject_alt_names", ""),
        key_algorithm=getattr(args, "key_algorithm", ""),
        rsa_bits=getattr(args, "rsa_bits", 2048),
        poll_interval=args.poll_interval,
        max_timeout=args.max_timeout,
        request_timeout=args.request_timeout,
        revoke_reason=getattr(args, "reason", "Terraform destroy"),
    )


def build_client(config: EnrollmentConfig, credentials: CACredentials) -> CAClient:
    return CAClient(config.base_url, credentials, timeout=config.request_timeout)
