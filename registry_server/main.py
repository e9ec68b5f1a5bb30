import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from registry_server.api.routes import artifacts, discovery, providers
from registry_server.core.config import Settings, get_settings
from registry_server.core.errors import ApiError, TLSConfigurationError
from registry_server.core.tls import build_ssl_context
from registry_server.services.catalog import ArtifactCatalog
from registry_server.services.signing_keys import SigningKeyStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")


async def handle_api_error(request: Request, exc: ApiError):
    logger.debug("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=exc.headers)


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    logger.debug("%s %s -> %s", request.method, request.url.path, exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def handle_os_error(request: Request, exc: OSError):
    logger.error("I/O failure while handling %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title=settings.app_name, version="0.1.0")
    app.state.settings = settings
    app.state.catalog = ArtifactCatalog(settings.providers_dir, settings.provider_name)
    app.state.key_store = SigningKeyStore(settings.gpg_keys_dir)

    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(OSError, handle_os_error)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(discovery.router)
    app.include_router(providers.router)
    app.include_router(artifacts.router)
    return app


def run(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    try:
        ssl_context = build_ssl_context(settings.tls_cert_file, settings.tls_key_file)
    except TLSConfigurationError as exc:
        logger.critical("%s", exc)
        raise SystemExit(1) from exc

    config = uvicorn.Config(
        create_app(settings),
        host=settings.registry_host,
        port=settings.registry_port,
        ssl_certfile=settings.tls_cert_file,
        ssl_keyfile=settings.tls_key_file,
        log_level=settings.log_level.lower(),
    )
    config.load()
    # Replace uvicorn's default context with the one enforcing the minimum TLS version.
    config.ssl = ssl_context

    logger.info("Registry server starting on https://%s:%s", settings.registry_host, settings.registry_port)
    logger.info("Serving provider: %s/%s v%s", settings.namespace, settings.provider_name, settings.provider_version)
    logger.info("Using certificate: %s", settings.tls_cert_file)
    uvicorn.Server(config).run()


if __name__ == "__main__":
    run()
