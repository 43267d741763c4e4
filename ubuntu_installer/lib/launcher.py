from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..config import InstallerConfig
from ..logging_utils import SUCCESS
from .command import run_cmd
from .proot import launcher_argv

logger = logging.getLogger(__name__)

TERMUX_BASH = "/data/data/com.termux/files/usr/bin/bash"

_HEADER = """\
#!{shell}
cd "$(dirname "$0")" || exit 1

if [ ! -d "{rootfs}" ]; then
    echo "Error: {rootfs} not found!"
    echo "Please run the installer."
    exit 1
fi

if [ ! -f "{rootfs}/bin/bash" ]; then
    echo "Error: Installation incomplete!"
    exit 1
fi

unset LD_PRELOAD

"""


def render_start_script(config: InstallerConfig) -> str:
    argv = launcher_argv(
        config.directory,
        config.launcher_binds,
        path=config.launcher_path,
        lang=config.launcher_lang,
    )
    # One word (or option + value) per continued line.
    lines = ["exec " + argv[0]]
    i = 1
    while i < len(argv):
        word = argv[i]
        if word == "/bin/bash":
            lines.append(" ".join(argv[i:]))
            break
        if word in {"-r", "-b", "-w", "/usr/bin/env"}:
            lines.append(f"{word} {argv[i + 1]}")
            i += 2
        else:
            lines.append(word)
            i += 1
    body = " \\\n    ".join(lines) + "\n"
    return _HEADER.format(shell=TERMUX_BASH, rootfs=config.directory) + body


def write_start_script(path: Path, *, binds_dir: Path, config: InstallerConfig) -> Path:
    logger.info("Creating start script...")

    binds_dir.mkdir(parents=True, exist_ok=True)
    path.write_text(render_start_script(config), encoding="utf-8")
    path.chmod(0o755)

    if shutil.which("termux-fix-shebang"):
        r = run_cmd(["termux-fix-shebang", str(path)], check=False)
        if r.returncode != 0:
            logger.warning("termux-fix-shebang failed (%s); keeping script as written", r.returncode)

    logger.log(SUCCESS, "Start script created!")
    return path
