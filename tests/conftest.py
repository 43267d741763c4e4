from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from ubuntu_installer.config import InstallerConfig
from ubuntu_installer.lib import arch as arch_mod
from ubuntu_installer.lib import archive as archive_mod
from ubuntu_installer.lib import hostcheck, launcher, net, proot
from ubuntu_installer.lib.command import CmdResult
from ubuntu_installer.lib.env import InstallPaths
from ubuntu_installer.logging_utils import ConsoleFormatter
from ubuntu_installer.pipeline import InstallCtx

MB = 1024 * 1024

DF_HEADER = "Filesystem     Type 1024-blocks     Used Available Capacity Mounted on\n"


def df_output(fs_type: str = "ext4", free_kb: int = 8_000_000) -> str:
    return DF_HEADER + f"/dev/block/dm-5 {fs_type} 100000000 1000 {free_kb} 10% /data\n"


@pytest.fixture(autouse=True)
def _capture_debug(caplog):
    caplog.set_level(logging.DEBUG)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h.formatter, ConsoleFormatter) or getattr(h, "baseFilename", "").endswith(
            "installer-test.log"
        ):
            root.removeHandler(h)
            h.close()
    for attr in ("_ubuntu_installer_configured", "_ubuntu_installer_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


@pytest.fixture
def log_path(tmp_path: Path) -> str:
    return str(tmp_path / "logs" / "installer-test.log")


@pytest.fixture
def config() -> InstallerConfig:
    return InstallerConfig(raw={"download": {"retry_delay_s": 0}})


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    d = tmp_path / "home"
    d.mkdir()
    return d


@pytest.fixture
def paths(config: InstallerConfig, workdir: Path) -> InstallPaths:
    return InstallPaths.for_config(config, workdir)


@pytest.fixture
def ctx(config: InstallerConfig, paths: InstallPaths) -> InstallCtx:
    return InstallCtx(config=config, paths=paths)


def make_rootfs(root: Path) -> None:
    for rel in ("bin", "usr/bin", "etc", "lib", "tmp"):
        (root / rel).mkdir(parents=True, exist_ok=True)
    for rel in ("bin/bash", "bin/sh", "usr/bin/env", "usr/bin/groups"):
        (root / rel).write_text("#!fake\n", encoding="utf-8")
    (root / "etc/passwd").write_text("root:x:0:0:root:/root:/bin/bash\n", encoding="utf-8")


class FakeHost:
    """Stands in for df/wget/gzip/tar/proot so the install flow runs offline."""

    def __init__(self) -> None:
        self.fs_type = "ext4"
        self.free_kb = 8_000_000
        self.download_size = 150 * MB
        self.wget_results: List[int] = []
        self.wget_calls: List[List[str]] = []
        self.verify_calls: List[List[str]] = []
        self.extract_calls: List[Dict[str, Any]] = []
        self.extract_lines: List[str] = ["./etc/passwd", "./bin/bash"]
        self.on_wget: Callable[[List[str]], None] | None = None

    # hostcheck.run_cmd
    def host_cmd(self, argv, **kwargs) -> CmdResult:
        argv = list(argv)
        if argv[0] == "df":
            return CmdResult(argv, 0, df_output(self.fs_type, self.free_kb), "")
        if argv[:2] == ["uname", "-o"]:
            return CmdResult(argv, 0, "Android\n", "")
        raise AssertionError(f"unexpected host command {argv}")

    # net.stream_cmd
    def wget(self, argv, on_line=None, **kwargs) -> int:
        argv = list(argv)
        self.wget_calls.append(argv)
        if self.on_wget is not None:
            self.on_wget(argv)
        rc = self.wget_results.pop(0) if self.wget_results else 0
        if rc == 0:
            dest = Path(argv[argv.index("-O") + 1])
            with dest.open("wb") as f:
                f.truncate(self.download_size)
            if on_line:
                on_line("100% [=====>] done")
        return rc

    # archive.run_cmd
    def verify_cmd(self, argv, **kwargs) -> CmdResult:
        argv = list(argv)
        self.verify_calls.append(argv)
        return CmdResult(argv, 0, "./\n./bin/bash\n" if argv[0] == "tar" else "", "")

    # proot.stream_cmd
    def extract(self, argv, on_line=None, cwd=None, **kwargs) -> int:
        self.extract_calls.append({"argv": list(argv), "cwd": cwd})
        make_rootfs(Path(cwd))
        for ln in self.extract_lines:
            if on_line:
                on_line(ln)
        return 0


@pytest.fixture
def fake_host(monkeypatch) -> FakeHost:
    host = FakeHost()
    monkeypatch.setattr(hostcheck, "run_cmd", host.host_cmd)
    monkeypatch.setattr(hostcheck, "missing_commands", lambda commands: [])
    monkeypatch.setattr(arch_mod.platform, "machine", lambda: "aarch64")
    monkeypatch.setattr(net, "stream_cmd", host.wget)
    monkeypatch.setattr(archive_mod, "run_cmd", host.verify_cmd)
    monkeypatch.setattr(proot, "stream_cmd", host.extract)
    monkeypatch.setattr(launcher.shutil, "which", lambda name: None)
    return host
