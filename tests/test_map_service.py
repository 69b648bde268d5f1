import re
from urllib.parse import parse_qsl

import httpx
import pytest
from PIL import UnidentifiedImageError
from respx import MockRouter

from map_proxy.services import map_service

MAP_URL = "https://gis.example.com/server/rest/services/Presence/MapServer"
EXPORT_URL = re.compile(rf"{re.escape(MAP_URL)}/export(\?.*)?$")


@pytest.mark.asyncio
async def test_map_export_decodes_image(respx_mock: MockRouter, png_bytes):
    route = respx_mock.post(EXPORT_URL).mock(
        return_value=httpx.Response(200, content=png_bytes, headers={"Content-Type": "image/png"})
    )

    image = await map_service.get_map_export(
        MAP_URL, "2600000,1200000,2601000,1201000", "800,600", True, "", "show:0,1", "abc"
    )

    assert image.size == (800, 600)
    request = route.calls.last.request
    assert request.url.params["token"] == "abc"
    assert dict(parse_qsl(request.content.decode())) == {
        "f": "image",
        "bbox": "2600000,1200000,2601000,1201000",
        "transparent": "true",
        "size": "800,600",
        "layers": "show:0,1",
    }


@pytest.mark.asyncio
async def test_map_export_without_token(respx_mock: MockRouter, png_bytes):
    route = respx_mock.post(EXPORT_URL).mock(return_value=httpx.Response(200, content=png_bytes))

    await map_service.get_map_export(MAP_URL, "0,0,1,1", "", False, '{"0":"STATUS=1"}', "", "")

    request = route.calls.last.request
    assert "token" not in request.url.params
    form = dict(parse_qsl(request.content.decode()))
    assert form["transparent"] == "false"
    assert form["layerDefs"] == '{"0":"STATUS=1"}'
    assert "size" not in form
    assert "layers" not in form


@pytest.mark.asyncio
async def test_map_export_rejects_non_image(respx_mock: MockRouter):
    respx_mock.post(EXPORT_URL).mock(
        return_value=httpx.Response(200, json={"error": {"code": 400, "message": "Invalid bbox"}})
    )

    with pytest.raises(UnidentifiedImageError):
        await map_service.get_map_export(MAP_URL, "bad", "", False, "", "", "abc")


@pytest.mark.asyncio
async def test_get_map_domains(respx_mock: MockRouter):
    domains = {"domains": [{"type": "codedValue", "name": "Status", "codedValues": [{"name": "Open", "code": 1}]}]}
    route = respx_mock.get(re.compile(rf"{re.escape(MAP_URL)}/queryDomains\?.*")).mock(
        return_value=httpx.Response(200, json=domains)
    )

    result = await map_service.get_map_domains(MAP_URL, "[0,1]", "abc")

    assert result == domains
    assert dict(route.calls.last.request.url.params) == {"f": "json", "token": "abc", "layers": "[0,1]"}
