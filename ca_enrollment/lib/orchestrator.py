"""Issuance orchestrator driving key generation, enrollment and collection."""

import time
from collections.abc import Callable

from .artifacts import ArtifactStore
from .ca_client import CAClient
from .cert_utils import generate_key_pair
from .config import EnrollmentConfig
from .csr_builder import CSRBuilder
from .errors import EnrollmentError, FilesystemError
from .logging_config import LOGGER, domain_log_handler
from .models import DownloadStatus, EnrollmentResult, IssuanceResult, IssuanceState


class IssuanceOrchestrator:
    """State machine for a single certificate issuance run.

    INIT -> KEY_GENERATED -> CSR_BUILT -> ENROLLED -> POLLING, ending in
    ISSUED, TIMED_OUT or FATAL. Only POLLING retries, bounded by max_timeout.
    Failures clean up the domain artifacts and re-raise the typed error.
    """

    def __init__(
        self,
        config: EnrollmentConfig,
        client: CAClient,
        artifacts: ArtifactStore | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize orchestrator.

        Args:
            config: Enrollment configuration for the domain
            client: CA API client
            artifacts: Artifact store (default: config.cert_file_path / config.domain)
            sleep: Sleep function used between download attempts
        """
        self.config = config
        self.client = client
        self.artifacts = artifacts or ArtifactStore(config.cert_file_path, config.domain)
        self.sleep = sleep
        self._state = IssuanceState.INIT
        self.transitions: list[IssuanceState] = [IssuanceState.INIT]

    @property
    def state(self) -> IssuanceState:
        return self._state

    def _reset(self) -> None:
        self._state = IssuanceState.INIT
        self.transitions = [IssuanceState.INIT]

    def _transition(self, state: IssuanceState) -> None:
        if self._state.is_terminal:
            raise RuntimeError(f"cannot leave terminal state {self._state.value}")
        LOGGER.info("%s: %s -> %s", self.config.domain, self._state.value, state.value)
        self._state = state
        self.transitions.append(state)

    def _fail(self, error: EnrollmentError) -> None:
        self._transition(IssuanceState.FATAL)
        LOGGER.error("Could not complete the process for %s: %s", self.config.domain, error)
        try:
            self.artifacts.cleanup()
        except FilesystemError as cleanup_error:
            LOGGER.error("Cleanup failed for %s: %s", self.config.domain, cleanup_error)

    def issue(self, previous_domain: str | None = None) -> IssuanceResult:
        """Generate key and CSR, enroll, and poll until a terminal state.

        Args:
            previous_domain: Domain of an earlier run whose artifacts should be removed

        Returns:
            IssuanceResult in state ISSUED or TIMED_OUT

        Raises:
            ConfigurationError: Before any I/O if the configuration is unusable
            EnrollmentError: Any failure after cleanup; the state is FATAL
        """
        self.config.validate(for_enrollment=True)
        self._reset()

        with domain_log_handler(self.artifacts.log_path):
            try:
                if previous_domain and previous_domain != self.config.domain:
                    self.artifacts.cleanup(previous_domain)
                return self._issue()
            except EnrollmentError as e:
                self._fail(e)
                raise

    def _issue(self) -> IssuanceResult:
        config = self.config

        LOGGER.info("Generating KEY for %s", config.domain)
        key_pair = generate_key_pair(config.key_algorithm, config.rsa_bits)
        self.artifacts.write_key(key_pair.private_key_pem)
        self._transition(IssuanceState.KEY_GENERATED)

        LOGGER.info("Generating CSR for %s", config.domain)
        request = CSRBuilder.build(key_pair, config.subject, config.subject_alt_names)
        self.artifacts.write_csr(request.pem)
        self._transition(IssuanceState.CSR_BUILT)

        LOGGER.info("Enrolling CERT for %s", config.domain)
        enrollment = self.client.enroll(
            csr_text=request.text,
            org_id=config.org_id,
            cert_type=config.cert_type,
            number_servers=config.number_servers,
            server_type=config.server_type,
            term=config.term,
            comments=config.comments,
            external_requester=config.external_requester,
            subject_alt_names=config.subject_alt_names,
        )
        self._transition(IssuanceState.ENROLLED)

        result = self._poll(enrollment)
        result.key_pem = key_pair.private_key_pem
        result.csr_pem = request.pem
        return result

    def _poll(self, enrollment: EnrollmentResult) -> IssuanceResult:
        self._transition(IssuanceState.POLLING)
        LOGGER.info("Downloading CERT for %s (sslId %d)", self.config.domain, enrollment.ssl_id)
        outcome = self.client.download(
            enrollment.ssl_id,
            poll_interval=self.config.poll_interval,
            max_timeout=self.config.max_timeout,
            sleep=self.sleep,
        )

        if outcome.status is DownloadStatus.ISSUED and outcome.certificate is not None:
            path = self.artifacts.write_certificate(outcome.certificate)
            LOGGER.info("%d bytes written to %s", len(outcome.certificate), path)
            self._transition(IssuanceState.ISSUED)
            return IssuanceResult(
                state=IssuanceState.ISSUED,
                ssl_id=enrollment.ssl_id,
                renew_id=enrollment.renew_id,
                certificate=outcome.certificate,
                elapsed=outcome.elapsed,
            )

        LOGGER.warning(
            "Timed out waiting %d/%d seconds for %s; sslId %d kept for a later collect. "
            "The timeout can be changed with max_timeout",
            outcome.elapsed,
            self.config.max_timeout,
            self.config.domain,
            enrollment.ssl_id,
        )
        self._transition(IssuanceState.TIMED_OUT)
        return IssuanceResult(
            state=IssuanceState.TIMED_OUT,
            ssl_id=enrollment.ssl_id,
            renew_id=enrollment.renew_id,
            elapsed=outcome.elapsed,
        )

    def resume(self, ssl_id: int, renew_id: str = "") -> IssuanceResult:
        """Continue polling for an enrollment that timed out earlier.

        A failure here is handled like one during issue(): the domain's
        .key, .csr and .crt files from the earlier run are deleted.

        Returns:
            IssuanceResult in state ISSUED or TIMED_OUT

        Raises:
            EnrollmentError: Any failure after cleanup; the state is FATAL
        """
        self.config.validate()
        self._reset()

        with domain_log_handler(self.artifacts.log_path):
            try:
                self._transition(IssuanceState.ENROLLED)
                return self._poll(EnrollmentResult(ssl_id=ssl_id, renew_id=renew_id))
            except EnrollmentError as e:
                self._fail(e)
                raise

    def revoke(self, ssl_id: int, reason: str | None = None) -> bool:
        """Revoke a certificate and remove its artifacts.

        Independent of the issuance state; any known sslId can be revoked.

        Raises:
            CAProtocolError: If the CA does not confirm the revocation
        """
        with domain_log_handler(self.artifacts.log_path):
            LOGGER.info("Revoking sslId %d for %s", ssl_id, self.config.domain)
            revoked = self.client.revoke(ssl_id, reason or self.config.revoke_reason)
            LOGGER.info("Certificate successfully revoked")
            self.artifacts.cleanup()
            return revoked
