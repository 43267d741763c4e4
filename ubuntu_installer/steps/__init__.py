from .step_10_preflight import PreflightStep
from .step_20_detect_arch import DetectArchStep
from .step_30_download_rootfs import DownloadRootFSStep
from .step_40_extract_rootfs import ExtractRootFSStep
from .step_50_configure_rootfs import ConfigureRootFSStep
from .step_60_create_launcher import CreateLauncherStep
from .step_90_cleanup_temp import CleanupTempStep

__all__ = [
    "PreflightStep",
    "DetectArchStep",
    "DownloadRootFSStep",
    "ExtractRootFSStep",
    "ConfigureRootFSStep",
    "CreateLauncherStep",
    "CleanupTempStep",
]
