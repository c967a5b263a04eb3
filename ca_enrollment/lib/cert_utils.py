"""Key generation, serialization and CSR helper functions."""

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey, EllipticCurvePublicKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from .errors import ConfigurationError, KeyGenerationError
from .models import KeyPair

PrivateKey = RSAPrivateKey | EllipticCurvePrivateKey
PublicKey = RSAPublicKey | EllipticCurvePublicKey

EC_CURVES: dict[str, type[ec.EllipticCurve]] = {
    "P224": ec.SECP224R1,
    "P256": ec.SECP256R1,
    "P384": ec.SECP384R1,
    "P521": ec.SECP521R1,
}


def algorithm_tag(algorithm: str) -> str:
    """Map a key algorithm name to its KeyPair tag (RSA or EC-P*).

    Raises:
        ConfigurationError: If the name is not RSA or a supported curve
    """
    if algorithm in ("", "RSA"):
        return "RSA"
    if algorithm in EC_CURVES:
        return f"EC-{algorithm}"
    raise ConfigurationError(f"unrecognized elliptic curve: {algorithm!r}")


def generate_private_key(algorithm: str = "", rsa_bits: int = 2048) -> PrivateKey:
    """Generate an RSA key (empty algorithm) or an EC key on the named curve.

    Raises:
        ConfigurationError: If the curve name is not recognized
        KeyGenerationError: If the underlying library rejects the parameters
    """
    algorithm_tag(algorithm)
    try:
        if algorithm in ("", "RSA"):
            return rsa.generate_private_key(public_exponent=65537, key_size=rsa_bits)
        return ec.generate_private_key(EC_CURVES[algorithm]())
    except (ValueError, UnsupportedAlgorithm) as e:
        raise KeyGenerationError(f"failed to generate private key: {e}") from e


def generate_key_pair(algorithm: str = "", rsa_bits: int = 2048) -> KeyPair:
    """Generate a key pair and its PEM serialization."""
    tag = algorithm_tag(algorithm)
    private_key = generate_private_key(algorithm, rsa_bits)
    return KeyPair(
        algorithm=tag,
        private_key=private_key,
        private_key_pem=serialize_private_key(private_key),
    )


def serialize_private_key(key: PrivateKey) -> bytes:
    """Serialize private key to traditional OpenSSL PEM (RSA/EC PRIVATE KEY, no encryption)."""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


def deserialize_private_key(pem_data: bytes) -> PrivateKey:
    """Deserialize private key from PEM bytes."""
    key = serialization.load_pem_private_key(pem_data, password=None)
    if not isinstance(key, (RSAPrivateKey, EllipticCurvePrivateKey)):
        raise ValueError("expected RSA or EC private key")
    return key


def keys_match(private_key: PrivateKey, public_key: PublicKey) -> bool:
    """Return True if public_key is the public half of private_key."""
    own = private_key.public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    other = public_key.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return own == other


def validate_csr_signature(csr: x509.CertificateSigningRequest) -> bool:
    """Verify CSR self-signature to prove private key possession."""
    try:
        return csr.is_signature_valid
    except Exception:
        return False


def serialize_csr(csr: x509.CertificateSigningRequest) -> bytes:
    """Serialize CSR to PEM format."""
    return csr.public_bytes(serialization.Encoding.PEM)


def deserialize_csr(pem_data: bytes) -> x509.CertificateSigningRequest:
    """Deserialize CSR from PEM bytes."""
    return x509.load_pem_x509_csr(pem_data)


def csr_to_text(pem_data: bytes) -> str:
    """Strip newlines from a PEM CSR for embedding in a JSON request body."""
    return pem_data.decode("ascii").replace("\n", "")

