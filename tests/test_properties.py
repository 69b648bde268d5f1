from map_proxy.properties import PropertyStore, env_name, parse_properties


def test_parse_properties():
    text = """
# token service
map.service.token.service=https://gis.example.com/portal/sharing/rest/generateToken
map.service.token.username = gisuser
! legacy comment
map.service.token.timeout: 60
map.config.file=/etc/map/config.json
"""
    assert parse_properties(text) == {
        "map.service.token.service": "https://gis.example.com/portal/sharing/rest/generateToken",
        "map.service.token.username": "gisuser",
        "map.service.token.timeout": "60",
        "map.config.file": "/etc/map/config.json",
    }


def test_from_file(tmp_path):
    path = tmp_path / "map.properties"
    path.write_text("map.service.token.password=secret\n", encoding="utf-8")

    store = PropertyStore.from_file(str(path), use_environment=False)

    assert store.get_property("map.service.token.password") == "secret"
    assert store.get_property("map.service.token.username") is None


def test_missing_file_gives_empty_store(tmp_path):
    store = PropertyStore.from_file(str(tmp_path / "missing.properties"), use_environment=False)
    assert store.values == {}


def test_environment_fallback(monkeypatch):
    monkeypatch.setenv("MAP_SERVICE_TOKEN_USERNAME", "envuser")
    store = PropertyStore({"map.service.token.password": "secret"})

    assert env_name("map.service.token.username") == "MAP_SERVICE_TOKEN_USERNAME"
    assert store.get_property("map.service.token.username") == "envuser"
    assert store.get_property("map.service.token.password") == "secret"


def test_file_value_wins_over_environment(monkeypatch):
    monkeypatch.setenv("MAP_SERVICE_TOKEN_USERNAME", "envuser")
    store = PropertyStore({"map.service.token.username": "fileuser"})
    assert store.get_property("map.service.token.username") == "fileuser"


def test_parse_properties_whitespace_separator():
    assert parse_properties("map.service.token.username gisuser\nflag\n") == {
        "map.service.token.username": "gisuser",
        "flag": "",
    }


def test_parse_properties_escapes():
    text = "map.config.file=C:\\\\maps\\\\config.json\nmy\\ key = caf\\u00e9\\tbar\n"
    assert parse_properties(text) == {
        "map.config.file": "C:\\maps\\config.json",
        "my key": "caf\u00e9\tbar",
    }


def test_parse_properties_line_continuation():
    text = "map.service.token.service=https://gis.example.com/\\\n    portal/sharing/rest/generateToken\nnext=1\n"
    assert parse_properties(text) == {
        "map.service.token.service": "https://gis.example.com/portal/sharing/rest/generateToken",
        "next": "1",
    }
