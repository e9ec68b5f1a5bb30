import logging

from fastapi import APIRouter

from registry_server.api.deps import RegistrySettings
from registry_server.schemas.registry import ServiceDiscoveryResponse
from registry_server.services.registry_service import service_discovery

logger = logging.getLogger(__name__)

router = APIRouter(tags=["discovery"])


@router.get("/.well-known/terraform.json", response_model=ServiceDiscoveryResponse)
def terraform_service_discovery(settings: RegistrySettings) -> ServiceDiscoveryResponse:
    logger.info("Service discovery requested")
    return service_discovery(settings)
