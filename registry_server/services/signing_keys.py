from __future__ import annotations

import logging
from pathlib import Path

from registry_server.schemas.registry import SigningKeyRecord

logger = logging.getLogger(__name__)

PUBLIC_KEY_FILENAME = "public-key.asc"
KEY_ID_FILENAME = "key-id.txt"


class SigningKeyStore:
    """GPG public key distribution. Read failures degrade to an empty key set."""

    def __init__(self, gpg_keys_dir: str | Path) -> None:
        self.directory = Path(gpg_keys_dir)

    @property
    def public_key_path(self) -> Path:
        return self.directory / PUBLIC_KEY_FILENAME

    @property
    def key_id_path(self) -> Path:
        return self.directory / KEY_ID_FILENAME

    def load(self) -> list[SigningKeyRecord]:
        try:
            ascii_armor = self.public_key_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read public key %s: %s", self.public_key_path, exc)
            return []

        try:
            key_id = self.key_id_path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read key ID %s: %s", self.key_id_path, exc)
            return []

        return [SigningKeyRecord(key_id=key_id, ascii_armor=ascii_armor)]
