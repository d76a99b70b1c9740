import pytest

from lepmap.utils.io import load_settings, load_config, load_boundary, DEFAULT_SETTINGS


def test_load_settings_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_settings() == DEFAULT_SETTINGS


def test_load_settings_from_yaml(tmp_path):
    config_path = tmp_path / "settings.yaml"
    config_path.write_text("sigma: 0.25\nspecies: Iphiclides podalirius\n")

    settings = load_settings(config_path)
    assert settings["sigma"] == 0.25
    assert settings["species"] == "Iphiclides podalirius"
    assert settings["bin_width"] == DEFAULT_SETTINGS["bin_width"]


def test_load_settings_overrides_win(tmp_path):
    config_path = tmp_path / "settings.yaml"
    config_path.write_text("sigma: 0.25\n")

    settings = load_settings(config_path, overrides={"sigma": 1.0, "species": None})
    assert settings["sigma"] == 1.0
    assert settings["species"] == DEFAULT_SETTINGS["species"]


def test_load_settings_rejects_unknown_keys(tmp_path):
    config_path = tmp_path / "settings.yaml"
    config_path.write_text("bandwidth: 0.25\n")
    with pytest.raises(ValueError):
        load_settings(config_path)


def test_load_config_empty_file(tmp_path):
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("")
    assert load_config(config_path) == {}


def test_load_boundary_dissolves_and_reprojects(boundary, tmp_path):
    path = tmp_path / "boundary.gpkg"
    boundary.to_crs("EPSG:3857").to_file(path, driver="GPKG")

    loaded = load_boundary(path)
    assert len(loaded) == 1
    assert loaded.crs == "EPSG:4326"
    assert loaded.total_bounds == pytest.approx(boundary.total_bounds, abs=1e-6)


def test_load_boundary_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_boundary(tmp_path / "missing.geojson")


@pytest.mark.parametrize("scale", ["small", "Large", 50, "10"])
def test_load_settings_accepts_boundary_scales(scale):
    assert load_settings(overrides={"boundary_scale": scale})["boundary_scale"] == scale


def test_load_settings_rejects_unknown_boundary_scale(tmp_path):
    config_path = tmp_path / "settings.yaml"
    config_path.write_text("boundary_scale: huge\n")
    with pytest.raises(ValueError):
        load_settings(config_path)
