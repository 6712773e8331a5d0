"""共享测试夹具: 用 fake 进程启动器替代真实的 go"""

from __future__ import annotations

from pathlib import Path

import pytest

from godeps.core.config import Config
from godeps.utils.shell import get_launcher, set_launcher

GOPKG_LOCK = """\
[[projects]]
  name = "github.com/go-gitea/gitea"
  packages = [".", "modules/log", "modules/setting"]
  revision = "b7d9d9f5c8cb4d3dba6e3a1a5e3d0c2c37bb5e07"
  version = "1.5.0"

[[projects]]
  branch = "master"
  name = "golang.org/x/crypto"
  packages = ["ssh"]
  revision = "a49355c7e3f8fe157a85be2f77e6e269a0f89602"

[solve-meta]
  analyzer-name = "dep"
  inputs-digest = "abc"
"""

MOD_EDIT_JSON = """\
{
	"Module": {"Path": "example.com/app"},
	"Go": "1.21",
	"Require": [
		{"Path": "rsc.io/quote", "Version": "v1.5.2"},
		{"Path": "golang.org/x/text", "Version": "v0.0.0-20170915032832-14c0d48ead0c", "Indirect": true}
	]
}
"""


class FakeProcess:
    """模拟 subprocess.Popen 的最小子集"""

    def __init__(
        self, returncode: int = 0, stdout: str = "", stderr: str = "",
        raises: BaseException | None = None,
    ) -> None:
        self._exit = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.raises = raises
        self.returncode: int | None = None
        self.timeout: float | None = None
        self.killed = False
        self.waited = False

    def communicate(self, timeout: float | None = None) -> tuple[str, str]:
        self.timeout = timeout
        if self.raises is not None:
            raise self.raises
        self.returncode = self._exit
        return self.stdout, self.stderr

    def kill(self) -> None:
        self.killed = True

    def wait(self, timeout: float | None = None) -> int:
        self.waited = True
        if self.returncode is None:
            self.returncode = -9
        return self.returncode


class FakeLauncher:
    """按顺序返回预置进程；只剩一个时重复使用"""

    def __init__(self, *processes: FakeProcess, error: OSError | None = None) -> None:
        self.processes = list(processes) or [FakeProcess()]
        self.error = error
        self.calls: list[tuple[list[str], str]] = []

    def spawn(self, args: list[str], *, cwd: str) -> FakeProcess:
        self.calls.append((list(args), cwd))
        if self.error is not None:
            raise self.error
        if len(self.processes) > 1:
            return self.processes.pop(0)
        return self.processes[0]


@pytest.fixture()
def make_process():
    return FakeProcess


@pytest.fixture()
def make_launcher():
    return FakeLauncher


@pytest.fixture()
def global_launcher():
    """临时替换全局进程启动器，用例结束后恢复"""
    original = get_launcher()

    def _install(launcher):
        set_launcher(launcher)
        return launcher

    yield _install
    set_launcher(original)


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    probe_dir = tmp_path / "probe"
    probe_dir.mkdir()
    return Config(go_path="", probe_dir=str(probe_dir), timeout=5)


@pytest.fixture()
def gopkg_lock(tmp_path: Path) -> Path:
    project = tmp_path / "dep-project"
    project.mkdir()
    path = project / "Gopkg.lock"
    path.write_text(GOPKG_LOCK, encoding="utf-8")
    return path


@pytest.fixture()
def go_mod(tmp_path: Path) -> Path:
    project = tmp_path / "mod-project"
    project.mkdir()
    path = project / "go.mod"
    path.write_text("module example.com/app\n\ngo 1.21\n", encoding="utf-8")
    return path


@pytest.fixture()
def mod_edit_json() -> str:
    return MOD_EDIT_JSON
