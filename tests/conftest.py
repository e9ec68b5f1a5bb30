import os
import ssl
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from httpx import Client

from registry_server.core.config import Settings
from registry_server.main import create_app


RUN_INTEGRATION = os.getenv("RUN_INTEGRATION") == "1"
BASE_URL = os.getenv("BASE_URL", "https://localhost:5758")

TEST_TOKEN = "test-registry-token"
ARCHIVE_BYTES = b"abc"
PUBLIC_KEY = "-----BEGIN PGP PUBLIC KEY BLOCK-----\n\nmQINBGT3\n-----END PGP PUBLIC KEY BLOCK-----\n"
KEY_ID = "34365D9472D7468F"


@pytest.fixture(scope="session")
def base_url() -> str:
    return BASE_URL


@pytest.fixture(scope="session")
def live_client(base_url: str):
    ca_file = os.getenv("SSL_CERT_FILE")
    verify = ssl.create_default_context(cafile=ca_file) if ca_file else True
    with Client(base_url=base_url, timeout=20.0, verify=verify) as c:
        yield c


@pytest.fixture(scope="session")
def integration_enabled() -> bool:
    return RUN_INTEGRATION


@pytest.fixture
def registry_root(tmp_path: Path) -> Path:
    """A published mylocal v1.0.0 for linux_amd64 with checksums, signature and GPG key files."""
    platform_dir = tmp_path / "providers" / "linux_amd64"
    platform_dir.mkdir(parents=True)
    (platform_dir / "terraform-provider-mylocal_v1.0.0.zip").write_bytes(ARCHIVE_BYTES)
    (platform_dir / "SHA256SUMS").write_text(
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad  terraform-provider-mylocal_v1.0.0.zip\n"
    )
    (platform_dir / "SHA256SUMS.sig").write_bytes(b"\x89\x02\x33signature")

    keys_dir = tmp_path / "gpg-keys"
    keys_dir.mkdir()
    (keys_dir / "public-key.asc").write_text(PUBLIC_KEY)
    (keys_dir / "key-id.txt").write_text(KEY_ID + "\n")
    return tmp_path


def make_settings(root: Path, **overrides) -> Settings:
    values = {
        "registry_token": TEST_TOKEN,
        "providers_dir": str(root / "providers"),
        "gpg_keys_dir": str(root / "gpg-keys"),
        "public_url": "https://registry.test:5758",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(registry_root: Path) -> Settings:
    return make_settings(registry_root)


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def make_client(registry_root: Path):
    def _make(**overrides) -> TestClient:
        return TestClient(create_app(make_settings(registry_root, **overrides)))

    return _make
