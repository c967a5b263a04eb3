"""Enrollment configuration dataclasses and parameter resolution."""

import os
from dataclasses import dataclass, field

from cryptography import x509
from cryptography.x509 import oid

from .errors import ConfigurationError

ENV_USERNAME = "SECTIGO_CM_USER"
ENV_PASSWORD = "SECTIGO_CM_PASSWORD"
ENV_CUSTOMER_URI = "SECTIGO_CM_URI"

KEY_ALGORITHMS = ("", "RSA", "P224", "P256", "P384", "P521")


@dataclass
class SubjectAttributes:
    """X.509 subject attributes for the certificate request."""

    common_name: str
    country: str = ""
    province: str = ""
    locality: str = ""
    organization: str = ""
    organizational_unit: str = ""
    email_address: str = ""

    def to_x509_name(self) -> x509.Name:
        """Convert to cryptography x509.Name, email last as PKCS#9 emailAddress.

        Empty values are left out of the name. Non-empty values are embedded
        as given, without the library's country or length checks.
        """
        attributes = [
            (oid.NameOID.COUNTRY_NAME, self.country),
            (oid.NameOID.STATE_OR_PROVINCE_NAME, self.province),
            (oid.NameOID.LOCALITY_NAME, self.locality),
            (oid.NameOID.ORGANIZATION_NAME, self.organization),
            (oid.NameOID.ORGANIZATIONAL_UNIT_NAME, self.organizational_unit),
            (oid.NameOID.COMMON_NAME, self.common_name),
            (oid.NameOID.EMAIL_ADDRESS, self.email_address),
        ]
        return x509.Name(
            [x509.NameAttribute(name_oid, value, _validate=False) for name_oid, value in attributes if value]
        )


@dataclass(frozen=True)
class CACredentials:
    """Credentials sent as Login/Password/Customeruri headers."""

    username: str
    password: str = field(repr=False)
    customer_uri: str

    def to_headers(self) -> dict[str, str]:
        return {
            "Login": self.username,
            "Password": self.password,
            "Customeruri": self.customer_uri,
        }


@dataclass
class EnrollmentConfig:
    """Configuration for a single issuance run."""

    domain: str
    cert_file_path: str
    base_url: str
    org_id: int | None
    subject: SubjectAttributes
    cert_type: int = 0
    number_servers: int = 1
    server_type: int = -1
    term: int = 365
    comments: str = ""
    external_requester: str = ""
    subject_alt_names: str = ""
    key_algorithm: str = ""
    rsa_bits: int = 2048
    poll_interval: int = 30
    max_timeout: int = 600
    request_timeout: int = 30
    revoke_reason: str = "Terraform destroy"

    def validate(self, for_enrollment: bool = False) -> None:
        """Check the values that would otherwise fail mid-run.

        Args:
            for_enrollment: Also require the organization ID used by enroll

        Raises:
            ConfigurationError: If any value is unusable
        """
        if not self.domain:
            raise ConfigurationError("domain must not be empty")
        if not self.base_url:
            raise ConfigurationError("CA base URL must not be empty")
        if self.key_algorithm not in KEY_ALGORITHMS:
            raise ConfigurationError(f"unrecognized elliptic curve: {self.key_algorithm!r}")
        if self.poll_interval <= 0:
            raise ConfigurationError("poll interval must be positive")
        if self.max_timeout <= 0:
            raise ConfigurationError("max timeout must be positive")
        if for_enrollment and self.org_id is None:
            raise ConfigurationError("org_id is required to enroll")


def resolve_param(value: str | None, env_var: str, param: str | None = None) -> str:
    """Return the explicit value, falling back to an environment variable.

    Carriage returns are stripped from the result.

    Args:
        value: Explicitly supplied value (wins when non-empty)
        env_var: Environment variable consulted when value is empty
        param: Parameter name used in the error message

    Raises:
        ConfigurationError: If neither source provides a non-empty value
    """
    resolved = value or os.environ.get(env_var, "")
    if not resolved:
        raise ConfigurationError(
            f'{param or env_var} variable "{env_var}" not set or empty. '
            "Set it explicitly or as an environment variable and try again."
        )
    return resolved.replace("\r", "")


def credentials_from_env(
    username: str | None = None,
    password: str | None = None,
    customer_uri: str | None = None,
) -> CACredentials:
    """Build CA credentials from explicit values or SECTIGO_CM_* variables."""
    return CACredentials(
        username=resolve_param(username, ENV_USERNAME, "username"),
        password=resolve_param(password, ENV_PASSWORD, "password"),
        customer_uri=resolve_param(customer_uri, ENV_CUSTOMER_URI, "customer_uri"),
    )
