from __future__ import annotations

import hashlib
from pathlib import Path

CHUNK_SIZE = 64 * 1024


class ArtifactUnreadable(Exception):
    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


def sha256_file(path: str | Path) -> str:
    """Stream a file through SHA-256 and return the lowercase hex digest."""
    file_path = Path(path)
    digest = hashlib.sha256()
    try:
        with file_path.open("rb") as fh:
            for chunk in iter(lambda: fh.read(CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as exc:
        raise ArtifactUnreadable(file_path, exc.strerror or str(exc)) from exc
    return digest.hexdigest()
