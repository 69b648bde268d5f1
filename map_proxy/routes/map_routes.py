import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status
from fastapi.responses import JSONResponse

from map_proxy.exceptions import SecurityError
from map_proxy.logging_config import log_structured
from map_proxy.properties import PropertyStore, get_properties
from map_proxy.security import get_claims
from map_proxy.services.map_service import get_map_domains
from map_proxy.services.token_service import get_service_token

router = APIRouter(prefix="/map")


def error_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def request_ip_mode(requestip: Optional[str]) -> bool:
    # Anything but "true" means referer identification
    return (requestip or "").lower() == "true"


def check_configuration(configuration: Dict[str, Any]) -> Optional[Response]:
    """Last check on the map configuration before it is served.

    Projects override ``get_configuration_check`` to reject a configuration
    (for example one without a client login) by returning an error response.
    """
    return None


def get_configuration_check() -> Callable[[Dict[str, Any]], Optional[Response]]:
    return check_configuration


@router.get("/configuration")
async def map_configuration(
    token: Optional[str] = Header(default=None),
    properties: PropertyStore = Depends(get_properties),
    configuration_check: Callable[[Dict[str, Any]], Optional[Response]] = Depends(get_configuration_check),
):
    try:
        if token is None:
            log_structured("Error input parameters", level="warning", path="/map/configuration")
            return error_response(status.HTTP_400_BAD_REQUEST, "Error input parameters")

        get_claims(token)

        config_file = properties.get_property("map.config.file")
        map_configuration = json.loads(Path(config_file).read_text(encoding="utf-8"))

        error = configuration_check(map_configuration)
        if error is not None:
            return error

        return map_configuration
    except SecurityError as e:
        log_structured("User not authorized", level="warning", error=str(e))
        return error_response(status.HTTP_401_UNAUTHORIZED, "User not authorized")
    except Exception as e:
        log_structured("Unexpected error", level="error", error=str(e), error_type=e.__class__.__name__)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Unexpected error")


@router.get("/token")
async def map_token(
    token: Optional[str] = Header(default=None),
    referer: Optional[str] = Header(default=None),
    service: Optional[str] = Query(default=None),
    requestip: Optional[str] = Query(default=None),
    properties: PropertyStore = Depends(get_properties),
):
    try:
        if token is None:
            log_structured("Error input parameters", level="warning", path="/map/token")
            return error_response(status.HTTP_400_BAD_REQUEST, "Error input parameters")

        get_claims(token)

        return await get_service_token(properties, referer, request_ip_mode(requestip), service)
    except SecurityError as e:
        log_structured("User not authorized", level="warning", error=str(e))
        return error_response(status.HTTP_401_UNAUTHORIZED, "User not authorized")
    except Exception as e:
        log_structured("Unexpected error", level="error", error=str(e), error_type=e.__class__.__name__)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Unexpected error")


@router.get("/domains")
async def map_domains(
    token: Optional[str] = Header(default=None),
    referer: Optional[str] = Header(default=None),
    requestip: Optional[str] = Query(default=None),
    url: Optional[str] = Query(default=None),
    layers: Optional[str] = Query(default=None),
    properties: PropertyStore = Depends(get_properties),
):
    log_structured("domains", level="debug", url=url, layers=layers)
    try:
        if token is None:
            log_structured("Error input parameters", level="warning", path="/map/domains")
            return error_response(status.HTTP_400_BAD_REQUEST, "Error input parameters")

        get_claims(token)

        map_token = (await get_service_token(properties, referer, request_ip_mode(requestip)))["token"]
        domains = await get_map_domains(url, layers, map_token)

        return domains["domains"]
    except SecurityError as e:
        log_structured("User not authorized", level="warning", error=str(e))
        return error_response(status.HTTP_401_UNAUTHORIZED, "User not authorized")
    except Exception as e:
        log_structured("Unexpected error", level="error", error=str(e), error_type=e.__class__.__name__)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Unexpected error")
