from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)

GROUPS_STUB = "#!/bin/sh\nexit 0\n"


def render_resolv_conf(nameservers: Sequence[str]) -> str:
    return "".join(f"nameserver {ns}\n" for ns in nameservers)


def write_resolv_conf(rootfs: Path, nameservers: Sequence[str]) -> Path:
    p = rootfs / "etc/resolv.conf"
    p.parent.mkdir(parents=True, exist_ok=True)
    # Ubuntu images ship resolv.conf as a symlink into /run.
    if p.is_symlink():
        p.unlink()
    p.write_text(render_resolv_conf(nameservers), encoding="utf-8")
    logger.info("Wrote %s (%s)", p, ", ".join(nameservers))
    return p


def stub_groups(rootfs: Path) -> bool:
    """Replace usr/bin/groups with a no-op; it fails noisily under proot."""

    p = rootfs / "usr/bin/groups"
    if not p.is_file():
        return False
    p.unlink()
    p.write_text(GROUPS_STUB, encoding="utf-8")
    p.chmod(0o755)
    logger.info("Stubbed %s", p)
    return True
