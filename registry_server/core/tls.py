"""
TLS material loading for the HTTPS transport.
"""

from __future__ import annotations

import ssl
from pathlib import Path

from registry_server.core.errors import TLSConfigurationError

MINIMUM_TLS_VERSION = ssl.TLSVersion.TLSv1_2


def build_ssl_context(cert_file: str | Path, key_file: str | Path) -> ssl.SSLContext:
    """
    Load the certificate/key pair into a server context.

    Raises TLSConfigurationError when either file is missing or cannot be parsed.
    """
    cert_path = Path(cert_file)
    key_path = Path(key_file)
    if not cert_path.is_file():
        raise TLSConfigurationError(f"Certificate file not found: {cert_path}")
    if not key_path.is_file():
        raise TLSConfigurationError(f"Key file not found: {key_path}")

    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.minimum_version = MINIMUM_TLS_VERSION
    try:
        context.load_cert_chain(certfile=str(cert_path), keyfile=str(key_path))
    except (ssl.SSLError, OSError) as exc:
        raise TLSConfigurationError(f"Failed to load certificate pair {cert_path} / {key_path}: {exc}") from exc
    return context
