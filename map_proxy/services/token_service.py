"""Token generation for ArcGIS servers (ArcGIS Online, Portal, Server).

See https://developers.arcgis.com/rest/services-reference/generate-token.htm
for the ``client=requestip`` / ``referer`` identification modes.
"""

from typing import Any, Dict, Optional

from map_proxy.config import DEFAULT_SERVICE_NAME
from map_proxy.exceptions import TokenServiceError
from map_proxy.http_client import build_client, record_response
from map_proxy.logging_config import log_structured
from map_proxy.properties import PropertyStore


async def get_token(
    token_service_url: Optional[str],
    username: Optional[str],
    password: Optional[str],
    referer: Optional[str],
    request_ip: bool,
    expiration: int = -1,
) -> Dict[str, Any]:
    """Exchange credentials for a token.

    ``expiration`` is in minutes; a negative value leaves it to the token
    service default (60 minutes). Raises ``TokenServiceError`` on any status
    other than 200.
    """
    data = {"username": username, "password": password}
    if request_ip:
        data["client"] = "requestip"
    else:
        data["referer"] = referer
    if expiration >= 0:
        data["expiration"] = str(expiration)

    async with build_client() as client:
        response = await client.post(token_service_url, params={"f": "json"}, data=data)
    record_response("getToken", response)

    if response.status_code != 200:
        log_structured("getToken: HTTP error", level="error", status_code=response.status_code)
        raise TokenServiceError(response.status_code)

    return response.json()


async def get_service_token(
    properties: PropertyStore,
    referer: Optional[str],
    request_ip: bool,
    service_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Token for a configured service, ``map.service`` by default.

    Reads ``<service>.token.service``, ``<service>.token.username``,
    ``<service>.token.password`` and ``<service>.token.timeout``.
    """
    if service_name is None:
        service_name = DEFAULT_SERVICE_NAME
    return await get_token(
        properties.get_property(f"{service_name}.token.service"),
        properties.get_property(f"{service_name}.token.username"),
        properties.get_property(f"{service_name}.token.password"),
        referer,
        request_ip,
        get_timeout(properties, service_name),
    )


async def get_token_from_properties(properties: PropertyStore, service_name: str) -> Dict[str, Any]:
    # Standalone properties files keep credentials and client identification
    # directly under the service name.
    return await get_token(
        properties.get_property(f"{service_name}.token.service"),
        properties.get_property(f"{service_name}.username"),
        properties.get_property(f"{service_name}.password"),
        properties.get_property(f"{service_name}.referer"),
        properties.get_property(f"{service_name}.requestip") == "true",
    )


def get_timeout(properties: PropertyStore, service_name: str) -> int:
    timeout = properties.get_property(f"{service_name}.token.timeout")
    if timeout:
        return int(timeout)
    return -1
