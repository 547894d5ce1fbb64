from trek.tiles import DEFAULT_MAP_TYPE, MAP_TYPES, preview_tile_url, resolve_map_type


def test_every_layer_has_a_base_and_zoom_cap() -> None:
    for key, cfg in MAP_TYPES.items():
        assert cfg.base.url.startswith("https://"), key
        assert cfg.max_native_zoom >= 19, key


def test_hybrid_stacks_labels_and_borders() -> None:
    hybrid = MAP_TYPES["hybrid"]
    assert hybrid.base == MAP_TYPES["satellite"].base
    assert len(hybrid.overlays) == 1
    assert hybrid.geojson[0].url.endswith(".geojson")


def test_to_dict_is_json_ready() -> None:
    data = MAP_TYPES["hybrid"].to_dict()
    assert isinstance(data["overlays"], list)
    assert data["geojson"][0]["style"]["weight"] == 1
    assert data["base"]["attribution"]


def test_resolve_map_type_falls_back() -> None:
    assert resolve_map_type("satellite") == "satellite"
    assert resolve_map_type("nope") == DEFAULT_MAP_TYPE
    assert resolve_map_type(None) == DEFAULT_MAP_TYPE


def test_preview_tile_url_fills_template() -> None:
    url = preview_tile_url("osm")
    assert url == "https://a.tile.openstreetmap.org/3/4/2.png"
    assert "{" not in preview_tile_url("voyager")
    assert preview_tile_url("satellite", z=1, x=0, y=1).endswith("/tile/1/1/0")
