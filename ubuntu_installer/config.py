from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_URL_TEMPLATE = (
    "https://partner-images.canonical.com/core/{version}/current/"
    "ubuntu-{version}-core-cloudimg-{arch}-root.tar.gz"
)

DEFAULT_LAUNCHER_PATH = (
    "/usr/local/sbin:/usr/local/bin:/bin:/usr/bin:/sbin:/usr/sbin:/usr/games:/usr/local/games"
)


def _value(section: Dict[str, Any], key: str, default: Any) -> Any:
    # Keys where 0 or false are meaningful; only a missing or null value falls back.
    value = section.get(key)
    return default if value is None else value


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    def _section(self, name: str) -> Dict[str, Any]:
        return self.raw.get(name) or {}

    @property
    def directory(self) -> str:
        return str(self.raw.get("directory") or "ubuntu-fs")

    @property
    def ubuntu_version(self) -> str:
        return str(self.raw.get("ubuntu_version") or "jammy")

    @property
    def archive_file(self) -> str:
        return str(self.raw.get("archive_file") or "ubuntu.tar.gz")

    @property
    def start_script(self) -> str:
        return str(self.raw.get("start_script") or "start.sh")

    @property
    def binds_dir(self) -> str:
        return str(self.raw.get("binds_dir") or "ubuntu-binds")

    @property
    def extract_log(self) -> str:
        return str(self.raw.get("extract_log") or "extract.log")

    @property
    def required_commands(self) -> List[str]:
        return list(self.raw.get("required_commands") or ["proot", "wget", "tar", "gzip"])

    @property
    def nameservers(self) -> List[str]:
        return list(self.raw.get("nameservers") or ["8.8.8.8", "8.8.4.4", "1.1.1.1"])

    # download

    @property
    def url_template(self) -> str:
        return str(self._section("download").get("url_template") or DEFAULT_URL_TEMPLATE)

    @property
    def max_download_retries(self) -> int:
        return int(self._section("download").get("max_retries") or 3)

    @property
    def retry_delay_s(self) -> float:
        return float(_value(self._section("download"), "retry_delay_s", 3))

    @property
    def download_timeout_s(self) -> int:
        return int(self._section("download").get("timeout_s") or 60)

    @property
    def download_tries(self) -> int:
        return int(self._section("download").get("tries") or 2)

    @property
    def download_waitretry_s(self) -> int:
        return int(_value(self._section("download"), "waitretry_s", 5))

    @property
    def check_certificate(self) -> bool:
        return bool(_value(self._section("download"), "check_certificate", True))

    # archive / storage

    @property
    def min_archive_mb(self) -> int:
        return int(_value(self._section("archive"), "min_size_mb", 100))

    @property
    def verify_timeout_s(self) -> float:
        return float(self._section("archive").get("verify_timeout_s") or 600)

    @property
    def min_free_kb(self) -> int:
        return int(_value(self._section("storage"), "min_free_kb", 1500000))

    @property
    def disallowed_fs(self) -> List[str]:
        return list(self._section("storage").get("disallowed_fs") or ["vfat", "exfat", "fuseblk", "fuse"])

    # launcher

    @property
    def launcher_binds(self) -> List[str]:
        binds = self._section("launcher").get("binds")
        if binds:
            return [str(b) for b in binds]
        return [
            "/dev",
            "/proc",
            "/sys",
            f"{self.directory}/tmp:/dev/shm",
            "/data/data/com.termux",
            "/:/host-rootfs",
            "/sdcard",
            "/storage",
            "/mnt",
        ]

    @property
    def launcher_path(self) -> str:
        return str(self._section("launcher").get("path") or DEFAULT_LAUNCHER_PATH)

    @property
    def launcher_lang(self) -> str:
        return str(self._section("launcher").get("lang") or "C.UTF-8")


def load_config(path: Optional[str] = None) -> InstallerConfig:
    if path is None:
        return InstallerConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("installer config must be YAML")

    import yaml

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"invalid YAML in {p.name}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{p.name} must contain a mapping/object")

    return InstallerConfig(raw=raw)
