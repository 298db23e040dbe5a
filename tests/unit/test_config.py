"""配置加载测试。"""

from pathlib import Path

import pytest

from petflow_desktop.core.config import (
    BuildMode,
    DesktopConfig,
    load_config,
    parse_mode,
    resolve_config,
    save_config,
)
from petflow_desktop.core.errors import ConfigError


def test_defaults_match_desktop_contract() -> None:
    config = DesktopConfig()
    assert config.mode == BuildMode.PRODUCTION
    assert config.service.port == 3000
    assert config.service.startup_timeout_s == 20.0
    assert config.service.poll_interval_s == 0.2
    assert config.service.connect_timeout_s == 0.2
    assert config.service.cookie_secure is False
    assert config.admin.email == "admin@local"


def test_roundtrip(tmp_path: Path) -> None:
    config = DesktopConfig(mode=BuildMode.DEVELOPMENT, core_dir="/src/petflow-core")
    config.service.port = 3100
    config.service.allowed_origins = ["http://localhost:5173"]
    config.admin.email = "ops@petflow"

    path = tmp_path / "config.yaml"
    save_config(config, path)
    loaded = load_config(path)

    assert loaded.mode == BuildMode.DEVELOPMENT
    assert loaded.core_dir == "/src/petflow-core"
    assert loaded.service.port == 3100
    assert loaded.service.allowed_origins == ["http://localhost:5173"]
    assert loaded.admin.email == "ops@petflow"


def test_partial_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("service:\n  port: 4000\n", encoding="utf-8")

    config = load_config(path)

    assert config.service.port == 4000
    assert config.service.startup_timeout_s == 20.0
    assert config.mode == BuildMode.PRODUCTION


def test_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == DesktopConfig()


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="未找到配置文件"):
        load_config(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("service: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="映射"):
        load_config(path)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("dev", BuildMode.DEVELOPMENT),
        ("Development", BuildMode.DEVELOPMENT),
        ("prod", BuildMode.PRODUCTION),
        (" production ", BuildMode.PRODUCTION),
    ],
)
def test_parse_mode(raw: str, expected: BuildMode) -> None:
    assert parse_mode(raw) == expected


def test_parse_mode_rejects_unknown() -> None:
    with pytest.raises(ConfigError, match="无效的构建模式"):
        parse_mode("staging")


class TestResolveConfig:
    def test_defaults_without_env(self) -> None:
        assert resolve_config(environ={}) == DesktopConfig()

    def test_env_overrides(self) -> None:
        config = resolve_config(
            environ={"PETFLOW_DESKTOP_MODE": "dev", "PETFLOW_CORE_DIR": "/work/petflow-core"}
        )
        assert config.mode == BuildMode.DEVELOPMENT
        assert config.core_dir == "/work/petflow-core"

    def test_config_path_from_env(self, tmp_path: Path) -> None:
        path = tmp_path / "desktop.yaml"
        save_config(DesktopConfig(identifier="com.example.test"), path)

        config = resolve_config(environ={"PETFLOW_DESKTOP_CONFIG": str(path)})

        assert config.identifier == "com.example.test"

    def test_explicit_path_wins_over_env(self, tmp_path: Path) -> None:
        explicit = tmp_path / "explicit.yaml"
        save_config(DesktopConfig(identifier="explicit"), explicit)

        config = resolve_config(explicit, environ={"PETFLOW_DESKTOP_CONFIG": str(tmp_path / "nope.yaml")})

        assert config.identifier == "explicit"

    def test_admin_env_left_to_launcher(self) -> None:
        """管理员账号变量在启动 sidecar 时读取，不改写配置。"""
        config = resolve_config(environ={"PETFLOW_ADMIN_EMAIL": "boss@shop", "PETFLOW_ADMIN_PASSWORD": "s3cret"})

        assert config.admin.email == "admin@local"
        assert config.admin.password == "admin"
