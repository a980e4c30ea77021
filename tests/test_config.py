"""Tests for launcher settings and the cache layout."""

from pathlib import Path

from mclaunch.config import LauncherSettings


def test_mc_dir_comes_from_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MC_DIR", str(tmp_path / "games"))
    monkeypatch.setenv("MCLAUNCH_CONCURRENT_DOWNLOADS", "3")

    settings = LauncherSettings()

    assert settings.mc_dir == tmp_path / "games"
    assert settings.concurrent_downloads == 3


def test_default_mc_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MC_DIR", raising=False)

    assert LauncherSettings().mc_dir == Path.home() / ".minecraft"


def test_cache_layout():
    settings = LauncherSettings(mc_dir=Path("/mc"))

    assert settings.descriptor_path("1.21.5") == Path("/mc/versions/1.21.5/version.json")
    assert settings.client_jar_path("1.21.5") == Path("/mc/versions/1.21.5/1.21.5.jar")
    assert settings.natives_dir("1.21.5") == Path("/mc/versions/1.21.5/natives")
    assert settings.asset_index_path("24") == Path("/mc/assets/indexes/24.json")
    assert settings.library_path("org/lwjgl/lwjgl.jar") == Path("/mc/libraries/org/lwjgl/lwjgl.jar")
