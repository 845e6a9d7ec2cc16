import pathlib

from scrydex.scrydex_config import DEFAULT_SCHEMA_VERSION, DEFAULT_VERSION, ScrydexConfig


def test_config_is_singleton():
    assert ScrydexConfig() is ScrydexConfig()


def test_config_reads_properties(tmp_path: pathlib.Path):
    properties = tmp_path / "scrydex.properties"
    properties.write_text("[Scrydex]\nversion=2.0.0\nschema_version=1.0.0\n", encoding="utf-8")

    config = ScrydexConfig.__wrapped__(properties)

    assert config.scrydex_version == "2.0.0"
    assert config.schema_version == "1.0.0"
    assert config.get("Scrydex", "missing", "fallback") == "fallback"


def test_config_defaults_without_file(tmp_path: pathlib.Path, caplog):
    config = ScrydexConfig.__wrapped__(tmp_path / "missing.properties")

    assert config.scrydex_version == DEFAULT_VERSION
    assert config.schema_version == DEFAULT_SCHEMA_VERSION
    assert not config.has_section("Scrydex")
    assert "using defaults" in caplog.text


def test_config_empty_value_uses_fallback(tmp_path: pathlib.Path):
    properties = tmp_path / "scrydex.properties"
    properties.write_text("[Scrydex]\nversion=\n", encoding="utf-8")

    config = ScrydexConfig.__wrapped__(properties)

    assert not config.has_option("Scrydex", "version")
    assert config.scrydex_version == DEFAULT_VERSION
