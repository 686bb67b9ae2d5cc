"""
Tests for configuration loading — install.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from docker_prebuilt import __version__
from docker_prebuilt.core.config.loader import (
    CONFIG_ENV,
    VERSION_ENV,
    find_config_file,
    load_config,
)
from docker_prebuilt.core.errors import ConfigError
from docker_prebuilt.data import DEFAULT_CONFIG


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    monkeypatch.delenv(VERSION_ENV, raising=False)


@pytest.fixture
def custom_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        target:
          version: "1.9.1-rc1"
          install_root: /opt/docker-prebuilt
        host:
          min_kernel: "4.0"
        requirements:
          - binary: git
            min_version: "2.0"
            rule: {kind: field, index: 2}
    """)
    path = tmp_path / "install.yml"
    path.write_text(content)
    return path


class TestBundledConfig:
    def test_defaults(self):
        config = load_config()
        assert config.target.name == "docker"
        assert config.target.version == __version__
        assert config.target.extract_path("linux") == "dist/docker"
        assert str(config.target.bin_dir("linux")) == "/usr/local/bin"
        assert config.host.min_kernel == "3.10"
        assert config.host.architecture == "x86_64"

    def test_install_root_expanded(self):
        assert "~" not in str(load_config().target.install_root)

    def test_declared_requirements(self):
        config = load_config()
        assert [r.binary for r in config.requirements] == ["git", "iptables", "xz", "ps"]
        xz = config.requirements[2]
        assert xz.rule.first_line
        assert xz.rule.strip == ("alpha", "beta")
        assert config.requirements[1].rule.kind == "regex"

    def test_default_file(self):
        assert find_config_file() == DEFAULT_CONFIG


class TestCustomConfig:
    def test_explicit_path(self, custom_yml: Path):
        config = load_config(custom_yml)
        assert config.target.version == "1.9.1"
        assert config.host.min_kernel == "4.0"
        assert len(config.requirements) == 1

    def test_env_path(self, custom_yml: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(CONFIG_ENV, str(custom_yml))
        assert find_config_file() == custom_yml
        assert load_config().host.min_kernel == "4.0"

    def test_env_version_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(VERSION_ENV, "1.11.2")
        config = load_config()
        assert config.target.version == "1.11.2"
        assert config.target.archive_name == "docker-1.11.2.tgz"

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_config(path).requirements == []


class TestInvalidConfig:
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yml"
        path.write_text("target: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_schema_error(self, tmp_path: Path):
        path = tmp_path / "schema.yml"
        path.write_text("requirements:\n  - binary: git\n    rule: {kind: regex}\n")
        with pytest.raises(ConfigError, match="Invalid install configuration"):
            load_config(path)

    def test_exit_code(self, tmp_path: Path):
        with pytest.raises(ConfigError) as exc:
            load_config(tmp_path / "nope.yml")
        assert exc.value.exit_code == 2
