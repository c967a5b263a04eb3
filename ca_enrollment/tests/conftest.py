"""Test fixtures for ca_enrollment tests."""

from pathlib import Path

import pytest

from ca_enrollment.lib.artifacts import ArtifactStore
from ca_enrollment.lib.ca_client import CAClient
from ca_enrollment.lib.cert_utils import generate_key_pair
from ca_enrollment.lib.config import CACredentials, EnrollmentConfig, SubjectAttributes
from ca_enrollment.lib.models import KeyPair
from ca_enrollment.tests.helpers import BASE_URL, FakeSleep


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Return temporary directory for test output artifacts."""
    return tmp_path


@pytest.fixture
def subject() -> SubjectAttributes:
    """Return test subject attributes."""
    return SubjectAttributes(
        common_name="example.com",
        country="GB",
        province="London",
        locality="London",
        organization="Test Org",
        organizational_unit="Test Unit",
        email_address="admin@example.com",
    )


@pytest.fixture
def credentials() -> CACredentials:
    return CACredentials(username="api-user", password="s3cret-pass", customer_uri="test-customer")


@pytest.fixture
def enrollment_config(temp_output_dir: Path, subject: SubjectAttributes) -> EnrollmentConfig:
    """Return enrollment configuration writing into the temp directory."""
    return EnrollmentConfig(
        domain="example.com",
        cert_file_path=str(temp_output_dir),
        base_url=BASE_URL,
        org_id=1234,
        subject=subject,
        cert_type=423,
        number_servers=1,
        server_type=-1,
        term=365,
        comments="test enrollment",
        external_requester="admin@example.com",
        subject_alt_names="www.example.com",
        poll_interval=10,
        max_timeout=30,
    )


@pytest.fixture
def ca_client(credentials: CACredentials) -> CAClient:
    return CAClient(BASE_URL, credentials, timeout=5)


@pytest.fixture
def artifact_store(temp_output_dir: Path) -> ArtifactStore:
    return ArtifactStore(temp_output_dir, "example.com")


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture(scope="session")
def rsa_key_pair() -> KeyPair:
    """Generate one RSA 2048 key pair for the session."""
    return generate_key_pair("", rsa_bits=2048)


@pytest.fixture(scope="session")
def ec_key_pair() -> KeyPair:
    """Generate one P256 key pair for the session."""
    return generate_key_pair("P256")
