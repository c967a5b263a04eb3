"""CA REST API client for enrollment, collection and revocation."""

import json
import time
import urllib.error
import urllib.request
from collections.abc import Callable
from typing import Any

from .config import CACredentials
from .errors import CAPermanentRejection, CAProtocolError
from .logging_config import LOGGER
from .models import PENDING_CODES, CollectResponse, DownloadOutcome, EnrollmentResult
from .types import EnrollRequestBody, RevokeRequestBody


def _decode_json(body: bytes) -> Any:
    """Decode a JSON body, returning None when it is not JSON."""
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None


class CAClient:
    """Client for the CA enroll/collect/revoke endpoints.

    Authenticates with Login/Password/Customeruri headers on every request.
    """

    def __init__(self, base_url: str, credentials: CACredentials, timeout: int = 30) -> None:
        """Initialize CA client.

        Args:
            base_url: CA API base URL (e.g. https://cert-manager.com/api/ssl/v1/)
            credentials: Login credentials sent as request headers
            timeout: Socket timeout in seconds for each request
        """
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.timeout = timeout

    def _request(self, method: str, path: str, body: dict | None = None) -> tuple[int, bytes]:
        """Send a request and return (status_code, body) for any HTTP status.

        Raises:
            CAProtocolError: If the CA cannot be reached
        """
        url = f"{self.base_url}/{path}"
        data = json.dumps(body).encode("utf-8") if body is not None else None
        headers = {"Content-Type": "application/json", **self.credentials.to_headers()}

        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                return response.status, response.read()
        except urllib.error.HTTPError as e:
            error_body = e.read() if e.fp is not None else b""
            e.close()
            return e.code, error_body
        except (urllib.error.URLError, OSError) as e:
            raise CAProtocolError(f"{method} {url} failed: {e}") from e

    def enroll(
        self,
        csr_text: str,
        org_id: int,
        cert_type: int,
        number_servers: int,
        server_type: int,
        term: int,
        comments: str = "",
        external_requester: str = "",
        subject_alt_names: str = "",
    ) -> EnrollmentResult:
        """Submit a CSR for enrollment.

        Success requires HTTP 200, a body containing "sslId" and a positive
        sslId value.

        Returns:
            EnrollmentResult with sslId and renewId

        Raises:
            CAProtocolError: On any other status or response shape
        """
        request_body = EnrollRequestBody(
            orgId=org_id,
            csr=csr_text,
            certType=cert_type,
            numberServers=number_servers,
            serverType=server_type,
            term=term,
            comments=comments,
            externalRequester=external_requester,
            subjAltNames=subject_alt_names,
        )
        status, body = self._request("POST", "enroll", dict(request_body))
        LOGGER.info("Enroll response status: %d", status)

        if status != 200 or b'"sslId"' not in body:
            raise CAProtocolError(f"certificate enrollment failed with status {status}", status)

        payload = _decode_json(body)
        if not isinstance(payload, dict):
            raise CAProtocolError("enroll response is not a JSON object", status)

        ssl_id = payload.get("sslId")
        if not isinstance(ssl_id, int) or isinstance(ssl_id, bool) or ssl_id <= 0:
            raise CAProtocolError(f"invalid sslId in enroll response: {ssl_id!r}", status)

        renew_id = payload.get("renewId") or ""
        LOGGER.info("Certificate successfully enrolled with sslId %d", ssl_id)
        return EnrollmentResult(ssl_id=ssl_id, renew_id=str(renew_id))

    def collect(self, ssl_id: int) -> CollectResponse:
        """Make one download attempt for an enrolled certificate.

        A 200 response carries the PEM chain as the raw body. Other responses
        carry {code, description}; codes 0 and -1400 mean still processing.

        Raises:
            CAPermanentRejection: If the CA reports any other code
            CAProtocolError: If a non-200 response has no status body
        """
        status, body = self._request("GET", f"collect/{ssl_id}/x509CO")
        LOGGER.info("Collect response status for sslId %d: %d", ssl_id, status)

        payload = _decode_json(body)
        code = 0
        description = ""
        if isinstance(payload, dict):
            code = payload.get("code", 0)
            description = str(payload.get("description", ""))
            if not isinstance(code, int):
                raise CAProtocolError(f"invalid code in collect response: {code!r}", status)
            if code not in PENDING_CODES:
                raise CAPermanentRejection(code, description)
        elif status != 200:
            raise CAProtocolError(f"unexpected collect response with status {status}", status)

        return CollectResponse(status_code=status, body=body, code=code, description=description)

    def download(
        self,
        ssl_id: int,
        poll_interval: int,
        max_timeout: int,
        sleep: Callable[[float], None] = time.sleep,
    ) -> DownloadOutcome:
        """Poll the collect endpoint until issued or max_timeout is reached.

        Each pending attempt adds poll_interval to the elapsed time and
        sleeps once before the next attempt.

        Returns:
            DownloadOutcome ISSUED with the unmodified body, or TIMED_OUT

        Raises:
            CAPermanentRejection: As soon as the CA rejects the request
        """
        elapsed = 0
        attempts = 0
        while True:
            attempts += 1
            response = self.collect(ssl_id)
            if response.is_issued:
                LOGGER.info("Certificate %d issued after %d attempts", ssl_id, attempts)
                return DownloadOutcome.issued(response.body, elapsed, attempts)

            elapsed += poll_interval
            LOGGER.info(
                "Waiting for %d / %d seconds before the next download attempt...",
                elapsed,
                max_timeout,
            )
            sleep(poll_interval)
            if elapsed >= max_timeout:
                LOGGER.warning(
                    "Timed out after %d/%d seconds waiting for sslId %d (last code %d)",
                    elapsed,
                    max_timeout,
                    ssl_id,
                    response.code,
                )
                return DownloadOutcome.timed_out(response.code, elapsed, attempts)

    def revoke(self, ssl_id: int, reason: str = "Terraform destroy") -> bool:
        """Revoke an issued certificate.

        Returns:
            True when the CA answers 204

        Raises:
            CAProtocolError: On any other status
        """
        status, _ = self._request("POST", f"revoke/{ssl_id}", dict(RevokeRequestBody(reason=reason)))
        LOGGER.info("Revoke response status for sslId %d: %d", ssl_id, status)
        if status != 204:
            raise CAProtocolError(f"revocation of {ssl_id} failed with status {status}", status)
        return True
