"""CSR builder for PKCS#10 certificate signing requests."""

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

from .cert_utils import csr_to_text, serialize_csr
from .config import SubjectAttributes
from .errors import CSRBuildError
from .models import CertificateRequest, KeyPair


class CSRBuilder:
    """Builds signed certificate signing requests for CA enrollment."""

    @staticmethod
    def build(
        key_pair: KeyPair,
        subject: SubjectAttributes,
        subject_alt_names: str = "",
    ) -> CertificateRequest:
        """Build and sign a CSR for the given key pair.

        The subject carries CN/C/ST/L/O/OU plus one PKCS#9 emailAddress
        attribute (IA5String). Subject alternative names are a single value,
        embedded as one DNSName when non-empty. The digest is always SHA-256;
        the signature scheme follows the key type.

        Args:
            key_pair: Generated key pair whose private key signs the request
            subject: Subject attributes, embedded without validation
            subject_alt_names: Single subject alternative name

        Returns:
            CertificateRequest with CSR object, PEM and newline-stripped text

        Raises:
            CSRBuildError: If the library rejects an attribute or signing fails
        """
        try:
            builder = x509.CertificateSigningRequestBuilder().subject_name(subject.to_x509_name())
            if subject_alt_names:
                builder = builder.add_extension(
                    x509.SubjectAlternativeName([x509.DNSName(subject_alt_names)]),
                    critical=False,
                )
            csr = builder.sign(key_pair.private_key, hashes.SHA256())
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise CSRBuildError(f"failed to build CSR for {subject.common_name}: {e}") from e

        pem = serialize_csr(csr)
        return CertificateRequest(csr=csr, pem=pem, text=csr_to_text(pem))
