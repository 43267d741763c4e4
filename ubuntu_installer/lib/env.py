from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..config import InstallerConfig


@dataclass(frozen=True)
class InstallPaths:
    base: Path
    rootfs: Path
    archive: Path
    archive_partial: Path
    start_script: Path
    start_script_old: Path
    binds_dir: Path
    extract_log: Path
    git_dir: Path

    @classmethod
    def for_config(cls, config: InstallerConfig, base: str | Path = ".") -> "InstallPaths":
        b = Path(base).resolve()
        return cls(
            base=b,
            rootfs=b / config.directory,
            archive=b / config.archive_file,
            archive_partial=b / f"{config.archive_file}.partial",
            start_script=b / config.start_script,
            start_script_old=b / f"{config.start_script}.old",
            binds_dir=b / config.binds_dir,
            extract_log=b / config.extract_log,
            git_dir=b / ".git",
        )

    @property
    def clean_targets(self) -> List[Path]:
        return [
            self.rootfs,
            self.binds_dir,
            self.start_script,
            self.archive,
            self.archive_partial,
            self.git_dir,
            self.extract_log,
            self.start_script_old,
        ]

    @property
    def failed_targets(self) -> List[Path]:
        return [self.rootfs, self.binds_dir, self.start_script, self.archive]
