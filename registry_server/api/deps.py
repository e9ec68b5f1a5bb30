import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from registry_server.core.config import Settings
from registry_server.core.error_codes import ErrorCode
from registry_server.core.errors import ApiError
from registry_server.core.security import bearer_token_matches
from registry_server.services.catalog import ArtifactCatalog
from registry_server.services.signing_keys import SigningKeyStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def get_registry_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog(request: Request) -> ArtifactCatalog:
    return request.app.state.catalog


def get_key_store(request: Request) -> SigningKeyStore:
    return request.app.state.key_store


RegistrySettings = Annotated[Settings, Depends(get_registry_settings)]
Catalog = Annotated[ArtifactCatalog, Depends(get_catalog)]
KeyStore = Annotated[SigningKeyStore, Depends(get_key_store)]


def require_registry_token(
    request: Request,
    settings: RegistrySettings,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> None:
    if not settings.require_auth:
        return

    if credentials is None or credentials.scheme != "Bearer":
        raise ApiError(
            status_code=401,
            code=ErrorCode.UNAUTHORIZED,
            message="Missing or malformed authorization header",
            headers=_CHALLENGE,
        )

    if not bearer_token_matches(credentials.credentials, settings.registry_token):
        raise ApiError(status_code=401, code=ErrorCode.INVALID_TOKEN, message="Invalid token", headers=_CHALLENGE)

    logger.info("Authenticated request: %s %s", request.method, request.url.path)
