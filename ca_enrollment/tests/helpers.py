"""Shared test helpers for ca_enrollment tests."""

import json

BASE_URL = "https://ca.example.test/api/ssl/v1/"
CERT_PEM = b"-----BEGIN CERTIFICATE-----\nMIIBfake\n-----END CERTIFICATE-----\n"


class FakeSleep:
    """Records requested sleeps instead of sleeping."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def json_body(payload: dict) -> bytes:
    return json.dumps(payload).encode("utf-8")
