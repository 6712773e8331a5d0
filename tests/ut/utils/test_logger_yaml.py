"""logger.py / yaml_io.py 单元测试"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import yaml

from godeps.utils.logger import JSONFormatter, context, reset_logging, setup_logging
from godeps.utils.yaml_io import load_yaml, save_yaml


class TestJSONFormatter:
    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            "godeps.core.coordinate", logging.WARNING, __file__, 10, "回退: %s", ("a/b",), None,
        )
        for k, v in extra.items():
            setattr(record, k, v)
        return record

    def test_basic_fields(self) -> None:
        entry = json.loads(JSONFormatter().format(self._record()))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "godeps.core.coordinate"
        assert entry["message"] == "回退: a/b"
        assert "context" not in entry

    def test_context_fields(self) -> None:
        record = self._record(**context(manifest="go.mod", module="rsc.io/quote"))
        entry = json.loads(JSONFormatter().format(record))
        assert entry["context"] == {"manifest": "go.mod", "module": "rsc.io/quote"}


class TestSetupLogging:
    def test_single_handler(self) -> None:
        level = logging.getLogger().level
        setup_logging("DEBUG")
        setup_logging("WARNING", json_output=True)
        root = logging.getLogger()
        try:
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert root.level == logging.WARNING
        finally:
            reset_logging()
            logging.getLogger().setLevel(level)


class TestYamlIO:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_yaml(tmp_path / "nope.yml") == {}

    def test_non_mapping(self, tmp_path: Path) -> None:
        p = tmp_path / "list.yml"
        p.write_text("- a\n- b\n", encoding="utf-8")
        assert load_yaml(p) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        p = tmp_path / "bad.yml"
        p.write_text("a: [1, 2\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_yaml(p)

    def test_save_roundtrip_keeps_order(self, tmp_path: Path) -> None:
        p = tmp_path / "out" / "deps.yml"
        save_yaml(p, [{"name": "quote", "namespace": "rsc.io", "描述": "引用"}])
        text = p.read_text(encoding="utf-8")
        assert text.index("name") < text.index("namespace")
        assert "引用" in text
        assert not list(p.parent.glob("*.tmp"))

    def test_failed_save_keeps_previous_file(self, tmp_path: Path) -> None:
        p = tmp_path / "deps.yml"
        save_yaml(p, {"name": "quote"})
        with pytest.raises(yaml.YAMLError):
            save_yaml(p, {"bad": object()})
        assert load_yaml(p) == {"name": "quote"}
        assert not list(tmp_path.glob("*.tmp"))
