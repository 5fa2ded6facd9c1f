"""Unit tests for Settings, load_config and resolve_library_path."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import make_settings
from lectro.config.loader import load_config, resolve_library_path
from lectro.utils.errors import ConfigurationError


class TestSettings:
    def test_defaults(self) -> None:
        settings = make_settings()
        assert settings.vectors_file_name == "lectro_vectors.json"
        assert settings.vectors_json_indent is None
        assert settings.gemini_embedding_model == "text-embedding-004"
        assert settings.get_available_llm_providers() == []

    def test_available_providers(self) -> None:
        settings = make_settings(openai_api_key="sk", gemini_api_key="g")
        assert settings.get_available_llm_providers() == ["openai", "gemini"]

    def test_env_var_mapping(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LECTRO_LIBRARY_PATH", "/srv/books")
        monkeypatch.setenv("VECTORS_JSON_INDENT", "2")
        from lectro.config.settings import Settings

        settings = Settings(_env_file=None)
        assert settings.lectro_library_path == "/srv/books"
        assert settings.vectors_json_indent == 2


class TestLoadConfig:
    def test_missing_file_yields_env_sections(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), make_settings(gemini_api_key="g"))
        assert config["llm"]["available_providers"] == ["gemini"]
        assert config["app"]["port"] == 3000

    def test_yaml_merged_with_env_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "app:\n  name: lectro\n  port: 1\nsearch:\n  default_limit: 5\n",
            encoding="utf-8",
        )
        config = load_config(str(path), make_settings(app_port=4000))
        assert config["app"] == {"name": "lectro", "port": 4000, "host": "0.0.0.0", "env": "development"}
        assert config["search"]["default_limit"] == 5

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("search: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(str(path), make_settings())

    def test_repository_config_file_loads(self) -> None:
        repo_config = Path(__file__).resolve().parents[2] / "config" / "config.yaml"
        config = load_config(str(repo_config), make_settings())
        assert config["indexing"]["chunk_size"] == 1000
        assert config["indexing"]["chunk_overlap"] == 200
        assert config["search"]["default_limit"] == 20


class TestResolveLibraryPath:
    def test_env_wins_over_config(self, tmp_path: Path) -> None:
        env_dir = tmp_path / "from-env"
        settings = make_settings(lectro_library_path=str(env_dir))
        config = {"library": {"path": str(tmp_path / "from-config")}}

        resolved = resolve_library_path(settings, config, cwd=tmp_path)

        assert resolved == env_dir
        assert env_dir.is_dir()
        assert not (tmp_path / "from-config").exists()

    def test_config_path_used_without_env(self, tmp_path: Path) -> None:
        config = {"library": {"path": "books"}}
        resolved = resolve_library_path(make_settings(), config, cwd=tmp_path)
        assert resolved == tmp_path / "books"
        assert resolved.is_dir()

    def test_default_library_under_cwd(self, tmp_path: Path) -> None:
        resolved = resolve_library_path(make_settings(), {"library": {"path": ""}}, cwd=tmp_path)
        assert resolved == tmp_path / "library"
        assert resolved.is_dir()

    def test_uncreatable_path_falls_back_to_default(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file", encoding="utf-8")
        settings = make_settings(lectro_library_path=str(blocker / "nested"))

        resolved = resolve_library_path(settings, cwd=tmp_path)

        assert resolved == tmp_path / "library"

    def test_uncreatable_default_raises(self, tmp_path: Path) -> None:
        (tmp_path / "library").write_text("file, not a directory", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            resolve_library_path(make_settings(), cwd=tmp_path)
