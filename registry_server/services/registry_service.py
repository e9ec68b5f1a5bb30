from __future__ import annotations

import logging
from urllib.parse import urlencode

from registry_server.core.config import Settings
from registry_server.core.error_codes import ErrorCode
from registry_server.core.errors import ApiError
from registry_server.schemas.registry import (
    DownloadDescriptor,
    PlatformOut,
    ProviderVersionOut,
    ProviderVersionsResponse,
    ServiceDiscoveryResponse,
    SigningKeysResponse,
)
from registry_server.services.catalog import ArtifactCatalog, ArtifactCoordinate, InvalidCoordinate, Platform, host_platform
from registry_server.services.integrity import ArtifactUnreadable, sha256_file
from registry_server.services.signing_keys import SigningKeyStore

logger = logging.getLogger(__name__)


def provider_not_found() -> ApiError:
    return ApiError(status_code=404, code=ErrorCode.PROVIDER_NOT_FOUND, message="Provider not found")


def ensure_provider(settings: Settings, namespace: str, name: str, version: str | None = None) -> None:
    """Only the single configured provider (and version, when given) is served."""
    if namespace != settings.namespace or name != settings.provider_name:
        raise provider_not_found()
    if version is not None and version != settings.provider_version:
        raise provider_not_found()


def resolve_platform(settings: Settings, os_name: str | None, arch: str | None) -> Platform:
    os_name = (os_name or "").strip()
    arch = (arch or "").strip()
    if os_name and arch:
        return Platform(os=os_name, arch=arch)
    if not settings.default_to_host_platform:
        raise ApiError(status_code=400, code=ErrorCode.PLATFORM_REQUIRED, message="Both os and arch are required")
    host = host_platform()
    return Platform(os=os_name or host.os, arch=arch or host.arch)


def service_discovery(settings: Settings) -> ServiceDiscoveryResponse:
    return ServiceDiscoveryResponse(providers_v1=f"{settings.base_url}/v1/providers/")


def provider_versions(settings: Settings, catalog: ArtifactCatalog) -> ProviderVersionsResponse:
    platforms = catalog.published_platforms(settings.provider_version) or [host_platform()]
    return ProviderVersionsResponse(
        versions=[
            ProviderVersionOut(
                version=settings.provider_version,
                protocols=list(settings.protocols),
                platforms=[PlatformOut(os=item.os, arch=item.arch) for item in platforms],
            )
        ]
    )


def build_download_descriptor(
    settings: Settings,
    catalog: ArtifactCatalog,
    key_store: SigningKeyStore,
    coordinate: ArtifactCoordinate,
) -> DownloadDescriptor:
    try:
        location = catalog.locate(coordinate)
    except InvalidCoordinate as exc:
        logger.info("Rejected download coordinate: %s", exc)
        raise ApiError(status_code=404, code=ErrorCode.ARTIFACT_NOT_FOUND, message="Provider binary not found") from exc

    try:
        shasum = sha256_file(location.archive)
    except ArtifactUnreadable as exc:
        logger.warning("Failed to calculate SHA256 for %s: %s", exc.path, exc.reason)
        raise ApiError(status_code=404, code=ErrorCode.ARTIFACT_NOT_FOUND, message="Provider binary not found") from exc

    logger.info("SHA256 for %s/%s: %s", coordinate.os, coordinate.arch, shasum)

    base = settings.base_url
    version_url = f"{base}/v1/providers/{coordinate.namespace}/{coordinate.name}/{coordinate.version}"
    query = urlencode({"os": coordinate.os, "arch": coordinate.arch})
    return DownloadDescriptor(
        protocols=list(settings.protocols),
        os=coordinate.os,
        arch=coordinate.arch,
        filename=location.filename,
        download_url=f"{base}/providers/{coordinate.platform.dirname}/{location.filename}",
        shasums_url=f"{version_url}/shasums?{query}",
        shasums_signature_url=f"{version_url}/shasums.sig?{query}",
        shasum=shasum,
        signing_keys=SigningKeysResponse(gpg_public_keys=key_store.load()),
    )
