"""Filesystem artifacts (key, CSR, certificate, log) for a domain."""

import os
from pathlib import Path

from .errors import FilesystemError
from .logging_config import LOGGER

KEY_FILE_MODE = 0o600
ARTIFACT_SUFFIXES = (".csr", ".crt", ".key")


class ArtifactStore:
    """Reads and writes {path}/{domain}.key|.csr|.crt|.log files."""

    def __init__(self, base_dir: Path | str, domain: str) -> None:
        self.base_dir = Path(base_dir)
        self.domain = domain

    def path_for(self, suffix: str, domain: str | None = None) -> Path:
        return self.base_dir / f"{domain or self.domain}{suffix}"

    @property
    def key_path(self) -> Path:
        return self.path_for(".key")

    @property
    def csr_path(self) -> Path:
        return self.path_for(".csr")

    @property
    def cert_path(self) -> Path:
        return self.path_for(".crt")

    @property
    def log_path(self) -> Path:
        return self.path_for(".log")

    def _write(self, path: Path, data: bytes, mode: int | None = None) -> Path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if mode is None:
                path.write_bytes(data)
            else:
                # created with mode, chmod covers pre-existing files
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.chmod(path, mode)
        except OSError as e:
            raise FilesystemError(f"failed to write {path}: {e}") from e
        return path

    def _read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise FilesystemError(f"failed to read {path}: {e}") from e

    def write_key(self, key_pem: bytes) -> Path:
        """Write the private key with 0600 permissions."""
        return self._write(self.key_path, key_pem, KEY_FILE_MODE)

    def write_csr(self, csr_pem: bytes) -> Path:
        return self._write(self.csr_path, csr_pem)

    def write_certificate(self, certificate: bytes) -> Path:
        """Write the downloaded certificate chain byte-for-byte."""
        return self._write(self.cert_path, certificate)

    def read_key(self) -> bytes:
        return self._read(self.key_path)

    def read_csr(self) -> bytes:
        return self._read(self.csr_path)

    def read_certificate(self) -> bytes:
        return self._read(self.cert_path)

    def cleanup(self, domain: str | None = None) -> list[Path]:
        """Remove the key, CSR and certificate of a domain.

        Missing files are skipped. Pass a previous domain name to clear its
        artifacts after the domain changed.

        Returns:
            Paths that were removed
        """
        removed: list[Path] = []
        for suffix in ARTIFACT_SUFFIXES:
            path = self.path_for(suffix, domain)
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise FilesystemError(f"failed to remove {path}: {e}") from e
            removed.append(path)

        if domain is not None and domain != self.domain:
            LOGGER.info("Deleting any previous CSR/KEY/CERT that was generated for %s", domain)
        else:
            LOGGER.info("Deleting any CSR/KEY/CERT that was generated for %s", self.domain)
        return removed
