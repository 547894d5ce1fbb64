from trek import schemas
from trek.client.state import ActiveMapStore, MapSettingsStore
from trek.client.storage import (
    ACTIVE_MAP_KEY,
    ALWAYS_SHOW_LABELS_KEY,
    MAP_TYPE_KEY,
    LocalStorage,
)


def test_values_survive_a_new_instance(tmp_path) -> None:
    path = tmp_path / "storage.json"
    LocalStorage(path).set(MAP_TYPE_KEY, "satellite")

    assert LocalStorage(path).get(MAP_TYPE_KEY) == "satellite"


def test_remove_and_defaults(tmp_path) -> None:
    storage = LocalStorage(tmp_path / "storage.json")
    storage.set(ALWAYS_SHOW_LABELS_KEY, None)
    storage.remove(ALWAYS_SHOW_LABELS_KEY)
    storage.remove("never-set")

    assert storage.get(ALWAYS_SHOW_LABELS_KEY, "fallback") == "fallback"


def test_unreadable_file_is_ignored(tmp_path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json", encoding="utf-8")

    assert LocalStorage(path).get(MAP_TYPE_KEY, "osm") == "osm"


def test_map_settings(tmp_path) -> None:
    storage = LocalStorage(tmp_path / "storage.json")
    settings = MapSettingsStore(storage)
    notified: list[str] = []
    settings.subscribe(lambda: notified.append(settings.map_type))

    assert settings.map_type == "osm"
    assert settings.always_show_labels is False

    settings.set_map_type("hybrid")
    settings.set_always_show_labels(True)

    reloaded = MapSettingsStore(LocalStorage(tmp_path / "storage.json"))
    assert reloaded.map_type == "hybrid"
    assert reloaded.always_show_labels is True
    assert notified == ["hybrid", "hybrid"]


def test_unknown_stored_map_type_falls_back(tmp_path) -> None:
    storage = LocalStorage(tmp_path / "storage.json")
    storage.set(MAP_TYPE_KEY, "watercolor")

    assert MapSettingsStore(storage).map_type == "osm"


def test_active_map_persists(tmp_path) -> None:
    storage = LocalStorage(tmp_path / "storage.json")
    active = ActiveMapStore(storage)
    active.set_active_map(schemas.Map(id=3, title="Trips", user_id=1))

    assert storage.get(ACTIVE_MAP_KEY)["userId"] == 1
    restored = ActiveMapStore(LocalStorage(tmp_path / "storage.json"))
    assert restored.active_map == schemas.Map(id=3, title="Trips", user_id=1)

    restored.set_active_map(None)
    assert ActiveMapStore(storage).active_map is None
