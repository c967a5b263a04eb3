"""Type definitions for CA REST API payloads."""

from typing import NotRequired, TypedDict


class EnrollRequestBody(TypedDict):
    """POST /enroll request body."""

    orgId: int
    csr: str
    certType: int
    numberServers: int
    serverType: int
    term: int
    comments: str
    externalRequester: str
    subjAltNames: str


class EnrollResponseBody(TypedDict):
    """POST /enroll response (partial)."""

    sslId: int
    renewId: NotRequired[str]


class CollectStatusBody(TypedDict, total=False):
    """GET /collect/{sslId}/x509CO status body (non-certificate responses)."""

    code: int
    description: str


class RevokeRequestBody(TypedDict):
    """POST /revoke/{sslId} request body."""

    reason: str
