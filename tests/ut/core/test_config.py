"""config.py 单元测试"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from godeps.core.config import Config, get_config, init_config
from godeps.core.exceptions import ConfigError


def _write(tmp_path: Path, data: dict) -> Path:
    p = tmp_path / "godeps.yml"
    p.write_text(yaml.dump(data), encoding="utf-8")
    return p


class TestConfig:
    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        cfg = Config.from_file(str(tmp_path / "none.yml"))
        assert cfg.timeout == 120
        assert cfg.probe_enabled

    def test_known_and_extra(self, tmp_path: Path) -> None:
        cfg = Config.from_file(str(_write(tmp_path, {"timeout": 30, "json_log": True, "team": "infra"})))
        assert cfg.timeout == 30
        assert cfg.json_log
        assert cfg.extra == {"team": "infra"}

    @pytest.mark.parametrize("timeout", [0, -1, "60"])
    def test_invalid_timeout(self, tmp_path: Path, timeout) -> None:
        with pytest.raises(ConfigError, match="timeout"):
            Config.from_file(str(_write(tmp_path, {"timeout": timeout})))

    def test_init_config_sets_global(self, tmp_path: Path) -> None:
        cfg = init_config(str(_write(tmp_path, {"go_path": "/opt/go/bin/go"})))
        assert get_config() is cfg
        assert cfg.to_dict()["go_path"] == "/opt/go/bin/go"


class TestResolveGo:
    def test_unset_uses_default(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="godeps.core.config"):
            assert Config().resolve_go() == "go"
        assert "go_path" in caplog.text

    def test_existing_file(self, tmp_path: Path) -> None:
        go = tmp_path / "go"
        go.write_text("#!/bin/sh\n", encoding="utf-8")
        assert Config(go_path=str(go)).resolve_go() == str(go.resolve())

    def test_missing_file_falls_back(self, tmp_path: Path, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="godeps.core.config"):
            assert Config(go_path=str(tmp_path / "missing")).resolve_go() == "go"
        assert "不存在" in caplog.text
