import io
from typing import Any, Dict

from PIL import Image

from map_proxy.http_client import build_client, record_response
from map_proxy.logging_config import log_structured


async def get_map_export(
    map_url: str,
    bbox: str,
    size: str,
    transparent: bool,
    layer_defs: str,
    layers: str,
    token: str,
) -> Image.Image:
    """Export a portion of the map as an image.

    ``bbox`` is ``xmin,ymin,xmax,ymax`` and ``size`` is ``width,height``.
    Empty ``size``, ``layer_defs`` and ``layers`` are left out of the request,
    an empty ``token`` is not sent. Raises ``PIL.UnidentifiedImageError`` when
    the response body is not an image.
    """
    params = {"token": token} if token else None

    log_structured(
        "export: parameters",
        level="debug",
        bbox=bbox,
        size=size,
        transparent=transparent,
        layer_defs=layer_defs,
        layers=layers
    )

    data = {"f": "image", "bbox": bbox, "transparent": "true" if transparent else "false"}
    if size:
        data["size"] = size
    if layer_defs:
        data["layerDefs"] = layer_defs
    if layers:
        data["layers"] = layers

    async with build_client() as client:
        response = await client.post(f"{map_url}/export", params=params, data=data)
    record_response("export", response)

    image = Image.open(io.BytesIO(response.content))
    image.load()
    return image


async def get_map_domains(map_url: str, layers: str, token: str) -> Dict[str, Any]:
    async with build_client() as client:
        response = await client.get(
            f"{map_url}/queryDomains",
            params={"f": "json", "token": token, "layers": layers}
        )
    record_response("getMapDomains", response)
    return response.json()
