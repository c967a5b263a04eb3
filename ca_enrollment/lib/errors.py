"""Error types for certificate enrollment operations."""


class EnrollmentError(Exception):
    """Base class for all enrollment failures."""


class ConfigurationError(EnrollmentError):
    """Missing or invalid parameter or credential."""


class KeyGenerationError(EnrollmentError):
    """Private key could not be generated."""


class CSRBuildError(EnrollmentError):
    """Certificate signing request could not be built or signed."""


class CAProtocolError(EnrollmentError):
    """Unexpected HTTP status, transport failure or malformed CA response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CAPermanentRejection(EnrollmentError):
    """CA reported a non-retryable status code while collecting a certificate."""

    def __init__(self, code: int, description: str) -> None:
        super().__init__(f"CA rejected request with code {code}: {description}")
        self.code = code
        self.description = description


class TimeoutExceeded(EnrollmentError):
    """Polling exhausted while the CA was still processing the request."""

    def __init__(self, ssl_id: int, elapsed: int) -> None:
        super().__init__(f"certificate {ssl_id} not issued after {elapsed} seconds")
        self.ssl_id = ssl_id
        self.elapsed = elapsed


class FilesystemError(EnrollmentError):
    """Artifact could not be written, read or removed."""
