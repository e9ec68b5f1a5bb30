import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from registry_server.api.deps import Catalog, KeyStore, RegistrySettings, require_registry_token
from registry_server.core.config import Settings
from registry_server.core.error_codes import ErrorCode
from registry_server.core.errors import ApiError
from registry_server.schemas.registry import DownloadDescriptor, ProviderVersionsResponse, SigningKeysResponse
from registry_server.services.catalog import ArtifactCatalog, ArtifactCoordinate, ArtifactLocation, InvalidCoordinate
from registry_server.services.registry_service import (
    build_download_descriptor,
    ensure_provider,
    provider_versions,
    resolve_platform,
)
from registry_server.services.signing_keys import SigningKeyStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/providers", tags=["providers"])


@router.get(
    "/{namespace}/{name}/versions",
    response_model=ProviderVersionsResponse,
    dependencies=[Depends(require_registry_token)],
)
def list_provider_versions(
    namespace: str,
    name: str,
    settings: RegistrySettings,
    catalog: Catalog,
) -> ProviderVersionsResponse:
    ensure_provider(settings, namespace, name)
    logger.info("Provider versions requested: %s/%s", namespace, name)
    return provider_versions(settings, catalog)


def _download(
    settings: Settings,
    catalog: ArtifactCatalog,
    key_store: SigningKeyStore,
    namespace: str,
    name: str,
    version: str,
    os_name: str | None,
    arch: str | None,
) -> DownloadDescriptor:
    ensure_provider(settings, namespace, name, version)
    target = resolve_platform(settings, os_name, arch)
    logger.info("Provider download requested: %s/%s %s %s/%s", namespace, name, version, target.os, target.arch)
    coordinate = ArtifactCoordinate(namespace=namespace, name=name, version=version, os=target.os, arch=target.arch)
    return build_download_descriptor(settings, catalog, key_store, coordinate)


@router.get(
    "/{namespace}/{name}/{version}/download/{os}/{arch}",
    response_model=DownloadDescriptor,
    dependencies=[Depends(require_registry_token)],
)
def download_provider(
    namespace: str,
    name: str,
    version: str,
    os: str,
    arch: str,
    settings: RegistrySettings,
    catalog: Catalog,
    key_store: KeyStore,
) -> DownloadDescriptor:
    return _download(settings, catalog, key_store, namespace, name, version, os, arch)


@router.get(
    "/{namespace}/{name}/{version}/download/",
    response_model=DownloadDescriptor,
    dependencies=[Depends(require_registry_token)],
)
def download_provider_by_query(
    namespace: str,
    name: str,
    version: str,
    settings: RegistrySettings,
    catalog: Catalog,
    key_store: KeyStore,
    os: str | None = Query(default=None),
    arch: str | None = Query(default=None),
) -> DownloadDescriptor:
    return _download(settings, catalog, key_store, namespace, name, version, os, arch)


def _platform_file(
    settings: Settings,
    catalog: ArtifactCatalog,
    namespace: str,
    name: str,
    version: str,
    os_name: str | None,
    arch: str | None,
) -> tuple[ArtifactCoordinate, ArtifactLocation | None]:
    ensure_provider(settings, namespace, name, version)
    target = resolve_platform(settings, os_name, arch)
    coordinate = ArtifactCoordinate(namespace=namespace, name=name, version=version, os=target.os, arch=target.arch)
    try:
        return coordinate, catalog.locate(coordinate)
    except InvalidCoordinate:
        return coordinate, None


@router.get("/{namespace}/{name}/{version}/shasums")
def get_shasums(
    namespace: str,
    name: str,
    version: str,
    settings: RegistrySettings,
    catalog: Catalog,
    os: str | None = Query(default=None),
    arch: str | None = Query(default=None),
) -> FileResponse:
    coordinate, location = _platform_file(settings, catalog, namespace, name, version, os, arch)
    if location is None or not location.shasums.is_file():
        logger.info("SHA256SUMS not found for %s/%s", coordinate.os, coordinate.arch)
        raise ApiError(status_code=404, code=ErrorCode.SHASUMS_NOT_FOUND, message="SHA256SUMS not found")
    logger.info("Serving SHA256SUMS for %s/%s", coordinate.os, coordinate.arch)
    return FileResponse(location.shasums, media_type="text/plain")


@router.get("/{namespace}/{name}/{version}/shasums.sig")
def get_shasums_signature(
    namespace: str,
    name: str,
    version: str,
    settings: RegistrySettings,
    catalog: Catalog,
    os: str | None = Query(default=None),
    arch: str | None = Query(default=None),
) -> FileResponse:
    coordinate, location = _platform_file(settings, catalog, namespace, name, version, os, arch)
    if location is None or not location.shasums_signature.is_file():
        logger.info("SHA256SUMS.sig not found for %s/%s", coordinate.os, coordinate.arch)
        raise ApiError(status_code=404, code=ErrorCode.SIGNATURE_NOT_FOUND, message="Signature not found")
    logger.info("Serving SHA256SUMS.sig for %s/%s", coordinate.os, coordinate.arch)
    return FileResponse(location.shasums_signature, media_type="application/pgp-signature")


@router.get("/{namespace}/{name}/{version}/signing-keys", response_model=SigningKeysResponse)
def get_signing_keys(
    namespace: str,
    name: str,
    version: str,
    settings: RegistrySettings,
    key_store: KeyStore,
) -> SigningKeysResponse:
    ensure_provider(settings, namespace, name, version)
    return SigningKeysResponse(gpg_public_keys=key_store.load())
