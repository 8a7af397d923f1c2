import re
import shutil
import subprocess
from pathlib import Path
from typing import List

import psutil

from nvme_munin.config import get_settings
from nvme_munin.log import logger
from nvme_munin.models.nvme import Availability

# First column of /proc/modules, e.g. "nvme_core 139264 5 nvme, Live ..."
_NVME_MODULE_PATTERN = re.compile(r"^nvme\S*\s", re.MULTILINE)


def _is_elevated() -> bool:
    """True if the plugin runs with an effective uid of root."""
    if not psutil.POSIX:
        return False
    return psutil.Process().uids().effective == 0


def run(subcommand: str, *args: str) -> List[str]:
    """
    Run `nvme <subcommand> <args>` and return its stdout lines.

    A missing or non-executable binary yields an empty list. A non-zero exit
    status is not fatal either: whatever was printed is returned, and if we
    are not root a warning points at the likely cause.
    """
    command = get_settings().nvme_command
    try:
        result = subprocess.run(
            [command, subcommand, *args],
            check=False,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        logger.debug("cannot run %s %s: %s", command, subcommand, exc)
        return []

    if result.returncode != 0:
        if not _is_elevated():
            logger.warning("%s: probably needs to run as user root", command)
        else:
            logger.debug(
                "%s %s exited with %d: %s",
                command,
                subcommand,
                result.returncode,
                result.stderr.strip(),
            )

    return result.stdout.splitlines()


def _nvme_driver_loaded(modules_path: str) -> bool:
    path = Path(modules_path)
    if not path.exists():
        return False
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.debug("cannot read %s: %s", modules_path, exc)
        return False
    return bool(_NVME_MODULE_PATTERN.search(content))


def detect_availability() -> Availability:
    """
    Tell whether nvme-cli can be used on this host.

    Without the binary, a loaded nvme kernel module means the host has NVMe
    devices and only the tool is missing. Non-Linux hosts have no module
    list and are simply unavailable.
    """
    settings = get_settings()
    if shutil.which(settings.nvme_command):
        return Availability.AVAILABLE

    if psutil.LINUX and _nvme_driver_loaded(settings.modules_path):
        return Availability.DRIVER_WITHOUT_TOOL

    return Availability.UNAVAILABLE
