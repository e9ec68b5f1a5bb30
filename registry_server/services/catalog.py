"""
On-disk provider catalog.

Layout under the providers root:

    {os}_{arch}/terraform-provider-{name}_v{version}.zip
    {os}_{arch}/SHA256SUMS
    {os}_{arch}/SHA256SUMS.sig
"""

from __future__ import annotations

import platform
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

SHASUMS_FILENAME = "SHA256SUMS"
SHASUMS_SIGNATURE_FILENAME = "SHA256SUMS.sig"

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_PLATFORM_PART = r"[a-z0-9]+"
_PLATFORM_PART_RE = re.compile(rf"^{_PLATFORM_PART}$")
_PLATFORM_RE = re.compile(rf"^({_PLATFORM_PART})_({_PLATFORM_PART})$")

_MACHINE_TO_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
}


class InvalidCoordinate(ValueError):
    pass


@dataclass(frozen=True)
class Platform:
    os: str
    arch: str

    @property
    def dirname(self) -> str:
        return f"{self.os}_{self.arch}"


@dataclass(frozen=True)
class ArtifactCoordinate:
    namespace: str
    name: str
    version: str
    os: str
    arch: str

    @property
    def platform(self) -> Platform:
        return Platform(os=self.os, arch=self.arch)


@dataclass(frozen=True)
class ArtifactLocation:
    filename: str
    archive: Path
    shasums: Path
    shasums_signature: Path


def host_platform() -> Platform:
    """Platform of the serving host, in registry (os, arch) spelling."""
    machine = platform.machine().lower()
    return Platform(os=platform.system().lower(), arch=_MACHINE_TO_ARCH.get(machine, machine))


def archive_filename(provider_name: str, version: str) -> str:
    return f"terraform-provider-{provider_name}_v{version}.zip"


def _safe_segment(value: str, field: str) -> str:
    if value in ("", ".", "..") or not _SEGMENT_RE.match(value):
        raise InvalidCoordinate(f"Invalid {field}: {value!r}")
    return value


class ArtifactCatalog:
    def __init__(self, providers_dir: str | Path, provider_name: str) -> None:
        self.root = Path(providers_dir)
        self.provider_name = provider_name

    def platform_dir(self, target: Platform) -> Path:
        for field, value in (("os", target.os), ("arch", target.arch)):
            if not _PLATFORM_PART_RE.match(value):
                raise InvalidCoordinate(f"Invalid {field}: {value!r}")
        return self.root / target.dirname

    def locate(self, coordinate: ArtifactCoordinate) -> ArtifactLocation:
        """Map a coordinate to its archive, checksum list and signature paths. Does not touch disk."""
        version = _safe_segment(coordinate.version, "version")
        directory = self.platform_dir(coordinate.platform)
        filename = archive_filename(self.provider_name, version)
        return ArtifactLocation(
            filename=filename,
            archive=directory / filename,
            shasums=directory / SHASUMS_FILENAME,
            shasums_signature=directory / SHASUMS_SIGNATURE_FILENAME,
        )

    def resolve_published_file(self, artifact_path: str) -> Path | None:
        """
        Resolve `{os}_{arch}/{filename}` to an existing file under the root.

        Only the last two path components are honoured. Any `.`/`..` component,
        a malformed platform name, or a path resolving outside the root yields None.
        """
        parts = [part for part in PurePosixPath(artifact_path.replace("\\", "/")).parts if part != "/"]
        if len(parts) < 2:
            return None
        if any(part in (".", "..") for part in parts):
            return None
        platform_name, filename = parts[-2], parts[-1]
        if not _PLATFORM_RE.match(platform_name) or not _SEGMENT_RE.match(filename):
            return None

        candidate = self.root / platform_name / filename
        root = self.root.resolve()
        resolved = candidate.resolve()
        if not resolved.is_relative_to(root):
            return None
        if not resolved.is_file():
            return None
        return resolved

    def published_platforms(self, version: str) -> list[Platform]:
        """Platforms whose directory holds the archive for `version`, sorted by name."""
        if not self.root.is_dir():
            return []
        filename = archive_filename(self.provider_name, version)
        found: list[Platform] = []
        for entry in sorted(self.root.iterdir()):
            match = _PLATFORM_RE.match(entry.name)
            if match and (entry / filename).is_file():
                found.append(Platform(os=match.group(1), arch=match.group(2)))
        return found
