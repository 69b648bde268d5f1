import io
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from PIL import Image

from map_proxy.config import ALGORITHM, SECRET_KEY
from map_proxy.main import app
from map_proxy.properties import PropertyStore, get_properties

TOKEN_SERVICE_URL = "https://gis.example.com/portal/sharing/rest/generateToken"


@pytest.fixture
def properties():
    return PropertyStore({
        "map.service.token.service": TOKEN_SERVICE_URL,
        "map.service.token.username": "gisuser",
        "map.service.token.password": "gispass",
    }, use_environment=False)


@pytest.fixture
def client(properties):
    app.dependency_overrides[get_properties] = lambda: properties
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def caller_token():
    return jwt.encode({"sub": "testuser", "user_id": 1}, SECRET_KEY, algorithm=ALGORITHM)


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGBA", (800, 600), (255, 0, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()
