import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from registry_server.api.deps import Catalog
from registry_server.core.error_codes import ErrorCode
from registry_server.core.errors import ApiError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/providers", tags=["artifacts"])


@router.get("/{artifact_path:path}")
def serve_provider_archive(artifact_path: str, catalog: Catalog) -> FileResponse:
    path = catalog.resolve_published_file(artifact_path)
    if path is None:
        logger.info("Provider binary not found: %r", artifact_path)
        raise ApiError(status_code=404, code=ErrorCode.ARTIFACT_NOT_FOUND, message="Provider binary not found")
    logger.info("Serving provider binary: %s", path.name)
    return FileResponse(path, media_type="application/octet-stream", filename=path.name)
