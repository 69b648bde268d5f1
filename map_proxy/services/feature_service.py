"""Client for ArcGIS feature-layer endpoints.

Every function issues exactly one request against ``feature_url``, the full
layer URL (feature service URL plus layer id, for example
``https://host/server/rest/services/Presence/FeatureServer/1``).

The HTTP status code is never checked: the body is always parsed as JSON and
returned as is, including provider-reported failures such as
``{"addResults": [{"success": false, ...}]}``.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from map_proxy.http_client import build_client, record_response
from map_proxy.logging_config import log_structured


class FeatureQuery(BaseModel):
    """Optional query parameters. ``None`` or ``""`` leaves a parameter out."""

    out_fields: Optional[str] = None
    geometry: Optional[str] = None
    order_by_fields: Optional[str] = None
    return_count_only: Optional[bool] = None
    return_geometry: Optional[bool] = None
    result_offset: Optional[str] = None
    result_record_count: Optional[str] = None
    geometry_type: Optional[str] = None
    in_sr: Optional[str] = None

    def to_params(self) -> Dict[str, str]:
        mapping = {
            "outFields": self.out_fields,
            "geometry": self.geometry,
            "orderByFields": self.order_by_fields,
            "returnCountOnly": self.return_count_only,
            "returnGeometry": self.return_geometry,
            "resultOffset": self.result_offset,
            "resultRecordCount": self.result_record_count,
            "geometryType": self.geometry_type,
            "inSR": self.in_sr,
        }
        return {name: format_param(value) for name, value in mapping.items() if is_set(value)}


def is_set(value: Any) -> bool:
    return value is not None and value != ""


def format_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


async def _get_json(operation: str, url: str, params: Dict[str, str]) -> Dict[str, Any]:
    async with build_client() as client:
        response = await client.get(url, params=params)
    record_response(operation, response)
    return response.json()


async def _post_form(operation: str, url: str, data: Dict[str, Any], params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    async with build_client() as client:
        response = await client.post(url, params=params, data=data)
    record_response(operation, response)
    return response.json()


async def get_feature(feature_url: str, object_id: int, token: str) -> Dict[str, Any]:
    return await _get_json(
        "getFeature",
        f"{feature_url}/{object_id}",
        {"f": "json", "token": token},
    )


async def get_features(
    feature_url: str,
    where: str,
    token: str,
    options: Optional[FeatureQuery] = None,
) -> Dict[str, Any]:
    """Query features matching ``where``.

    Without ``options`` all fields are returned (``outFields=*``). With
    ``options`` only the parameters it sets are sent.
    """
    if options is None:
        params = {"where": where, "outFields": "*", "f": "json", "token": token}
    else:
        # Options queries leave an empty token out
        params = {"f": "json"}
        if is_set(token):
            params["token"] = token
        params["where"] = where
        params.update(options.to_params())
    return await _get_json("getFeatures", f"{feature_url}/query", params)


async def get_features_from_target(url: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    return await _get_json("getFeatures", url, params or {})


async def get_extent(feature_url: str, where: str, token: str) -> Optional[Dict[str, Any]]:
    result = await _get_json(
        "getExtent",
        f"{feature_url}/query",
        {"where": where, "returnExtentOnly": "true", "f": "json", "token": token},
    )
    return result.get("extent")


async def get_feature_attributes(feature_url: str, object_id: int, token: str) -> Dict[str, Any]:
    feature = await get_feature(feature_url, object_id, token)
    return feature["feature"]["attributes"]


async def get_feature_attribute(feature_url: str, object_id: int, attribute_name: str, token: str) -> Any:
    attributes = await get_feature_attributes(feature_url, object_id, token)
    return attributes.get(attribute_name)


def get_attribute(features: Dict[str, Any], attribute_name: str) -> Any:
    """Attribute of the first feature of a query result, or None."""
    features_array = features.get("features")
    if not features_array:
        log_structured("No feature were found or it is empty", level="debug")
        return None

    attributes = features_array[0].get("attributes")
    if attributes is None:
        log_structured("No attributes were found in features", level="debug")
        return None
    return attributes.get(attribute_name)


async def add_feature(feature_url: str, feature: Dict[str, Any], rollback_on_failure: bool, token: str) -> Dict[str, Any]:
    return await add_features(feature_url, [feature], rollback_on_failure, token)


async def add_features(
    feature_url: str,
    features: List[Dict[str, Any]],
    rollback_on_failure: bool,
    token: str,
) -> Dict[str, Any]:
    """Add features; returns ``{"addResults": [{"objectId": .., "success": ..}, ...]}``."""
    payload = json.dumps(features)
    log_structured("addFeatures: features", level="debug", features=payload)
    return await _post_form(
        "addFeatures",
        f"{feature_url}/addFeatures",
        {
            "f": "json",
            "rollbackOnFailure": format_param(rollback_on_failure),
            "token": token,
            "features": payload,
        },
        params={"token": token},
    )


async def update_features(feature_url: str, features: List[Dict[str, Any]], token: str) -> Dict[str, Any]:
    payload = json.dumps(features)
    log_structured("updateFeatures: features", level="debug", features=payload)
    return await _post_form(
        "updateFeatures",
        f"{feature_url}/updateFeatures",
        {"f": "json", "token": token, "features": payload},
    )


async def delete_features(feature_url: str, where: str, rollback_on_failure: bool, token: str) -> Dict[str, Any]:
    return await _post_form(
        "deleteFeatures",
        f"{feature_url}/deleteFeatures",
        {
            "f": "json",
            "token": token,
            "rollbackOnFailure": format_param(rollback_on_failure),
            "where": where,
        },
    )
