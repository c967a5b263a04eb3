"""Result models for enrollment operations."""

from dataclasses import dataclass, field
from enum import StrEnum

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from .errors import TimeoutExceeded

PENDING_CODES = (0, -1400)


class IssuanceState(StrEnum):
    """States of the issuance state machine."""

    INIT = "init"
    KEY_GENERATED = "key_generated"
    CSR_BUILT = "csr_built"
    ENROLLED = "enrolled"
    POLLING = "polling"
    ISSUED = "issued"
    TIMED_OUT = "timed_out"
    FATAL = "fatal"

    @property
    def is_terminal(self) -> bool:
        return self in (IssuanceState.ISSUED, IssuanceState.TIMED_OUT, IssuanceState.FATAL)


class DownloadStatus(StrEnum):
    """Terminal result of a polling download; pending and fatal never leave CAClient."""

    ISSUED = "issued"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class KeyPair:
    """Generated private key with its algorithm tag and PEM encoding."""

    algorithm: str
    private_key: RSAPrivateKey | EllipticCurvePrivateKey = field(repr=False)
    private_key_pem: bytes = field(repr=False)


@dataclass(frozen=True)
class CertificateRequest:
    """Signed CSR in object, PEM and newline-stripped text form."""

    csr: x509.CertificateSigningRequest
    pem: bytes
    text: str


@dataclass(frozen=True)
class EnrollmentResult:
    """Identifiers assigned by the CA on enrollment."""

    ssl_id: int
    renew_id: str = ""


@dataclass(frozen=True)
class CollectResponse:
    """Single response from the collect endpoint."""

    status_code: int
    body: bytes
    code: int = 0
    description: str = ""

    @property
    def is_issued(self) -> bool:
        return self.status_code == 200


@dataclass(frozen=True)
class DownloadOutcome:
    """Result of polling the collect endpoint.

    A pending attempt is a CollectResponse that is not issued; download()
    only returns ISSUED or TIMED_OUT and raises on rejection.
    """

    status: DownloadStatus
    certificate: bytes | None = None
    code: int = 0
    elapsed: int = 0
    attempts: int = 0

    @classmethod
    def issued(cls, certificate: bytes, elapsed: int, attempts: int) -> "DownloadOutcome":
        return cls(DownloadStatus.ISSUED, certificate=certificate, elapsed=elapsed, attempts=attempts)

    @classmethod
    def timed_out(cls, code: int, elapsed: int, attempts: int) -> "DownloadOutcome":
        return cls(DownloadStatus.TIMED_OUT, code=code, elapsed=elapsed, attempts=attempts)


@dataclass
class IssuanceResult:
    """Final outcome of an issuance or resume run."""

    state: IssuanceState
    ssl_id: int
    renew_id: str = ""
    key_pem: bytes | None = field(default=None, repr=False)
    csr_pem: bytes | None = None
    certificate: bytes | None = None
    elapsed: int = 0

    @property
    def is_issued(self) -> bool:
        return self.state is IssuanceState.ISSUED

    def require_certificate(self) -> bytes:
        """Return the certificate, treating a timed-out run as an error.

        Raises:
            TimeoutExceeded: If the run ended before the CA issued the certificate
        """
        if self.certificate is None:
            raise TimeoutExceeded(self.ssl_id, self.elapsed)
        return self.certificate
