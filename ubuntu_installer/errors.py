from __future__ import annotations

from typing import Iterable, List, Optional, Sequence


class InstallerError(RuntimeError):
    """Fatal installer failure with optional remediation hints."""

    def __init__(self, message: str, *, hints: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.hints: List[str] = list(hints or [])


class PreflightError(InstallerError):
    pass


class UnsupportedArchitectureError(InstallerError):
    pass


class ArchiveError(InstallerError):
    pass


class DownloadError(InstallerError):
    pass


class ExtractionError(InstallerError):
    pass


class CommandError(InstallerError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)
