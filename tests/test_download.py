from __future__ import annotations

from pathlib import Path

import pytest

from conftest import MB

from ubuntu_installer.config import InstallerConfig
from ubuntu_installer.errors import DownloadError
from ubuntu_installer.lib import archive, net
from ubuntu_installer.lib.command import CmdResult


def test_rootfs_url():
    url = net.rootfs_url(InstallerConfig().url_template, version="jammy", arch="armhf")
    assert url == (
        "https://partner-images.canonical.com/core/jammy/current/"
        "ubuntu-jammy-core-cloudimg-armhf-root.tar.gz"
    )


def test_wget_argv_defaults(tmp_path: Path):
    argv = net.wget_argv("https://example.invalid/x.tar.gz", tmp_path / "x.tar.gz", InstallerConfig())
    assert argv[:4] == ["wget", "https://example.invalid/x.tar.gz", "-O", str(tmp_path / "x.tar.gz")]
    assert "--timeout=60" in argv
    assert "--tries=2" in argv
    assert "--waitretry=5" in argv
    assert "--no-check-certificate" not in argv


def test_wget_argv_without_certificate_check(tmp_path: Path):
    cfg = InstallerConfig(raw={"download": {"check_certificate": False}})
    assert "--no-check-certificate" in net.wget_argv("u", tmp_path / "x", cfg)


class FakeWget:
    def __init__(self, outcomes):
        # each outcome: (returncode, size in bytes written on success)
        self.outcomes = list(outcomes)
        self.calls = 0
        self.seen_existing = []

    def __call__(self, argv, on_line=None, **kwargs):
        self.calls += 1
        dest = Path(argv[argv.index("-O") + 1])
        self.seen_existing.append(dest.exists() or dest.with_name(dest.name + ".partial").exists())
        rc, size = self.outcomes.pop(0)
        with dest.open("wb") as f:
            f.truncate(size)
        return rc


@pytest.fixture
def verify_ok(monkeypatch):
    monkeypatch.setattr(archive, "run_cmd", lambda argv, **k: CmdResult(list(argv), 0, "./\n", ""))


def test_retries_then_succeeds(monkeypatch, tmp_path: Path, verify_ok):
    wget = FakeWget([(8, 10), (0, 1 * MB), (0, 120 * MB)])
    monkeypatch.setattr(net, "stream_cmd", wget)
    sleeps = []
    archive_path = tmp_path / "ubuntu.tar.gz"
    partial = tmp_path / "ubuntu.tar.gz.partial"
    partial.write_text("stale")

    net.download_rootfs(
        "u", archive=archive_path, partial=partial, config=InstallerConfig(), sleep=sleeps.append
    )

    assert wget.calls == 3
    assert sleeps == [3.0, 3.0]
    assert wget.seen_existing == [False, False, False]
    assert archive_path.stat().st_size == 120 * MB


def test_first_attempt_does_not_sleep(monkeypatch, tmp_path: Path, verify_ok):
    monkeypatch.setattr(net, "stream_cmd", FakeWget([(0, 100 * MB)]))
    sleeps = []
    net.download_rootfs(
        "u",
        archive=tmp_path / "a.tar.gz",
        partial=tmp_path / "a.tar.gz.partial",
        config=InstallerConfig(),
        sleep=sleeps.append,
    )
    assert sleeps == []


def test_exhausted_retries_leave_no_archive(monkeypatch, tmp_path: Path, verify_ok):
    wget = FakeWget([(0, 2 * MB), (4, 10), (0, 50 * MB)])
    monkeypatch.setattr(net, "stream_cmd", wget)
    archive_path = tmp_path / "ubuntu.tar.gz"

    with pytest.raises(DownloadError, match="after 3 attempts") as exc:
        net.download_rootfs(
            "u",
            archive=archive_path,
            partial=tmp_path / "ubuntu.tar.gz.partial",
            config=InstallerConfig(),
            sleep=lambda s: None,
        )

    assert wget.calls == 3
    assert not archive_path.exists()
    assert "Troubleshooting:" in exc.value.hints


def test_retry_bound_is_configurable(monkeypatch, tmp_path: Path, verify_ok):
    wget = FakeWget([(1, 0)] * 5)
    monkeypatch.setattr(net, "stream_cmd", wget)
    cfg = InstallerConfig(raw={"download": {"max_retries": 5}})

    with pytest.raises(DownloadError):
        net.download_rootfs(
            "u", archive=tmp_path / "a", partial=tmp_path / "a.partial", config=cfg, sleep=lambda s: None
        )
    assert wget.calls == 5
