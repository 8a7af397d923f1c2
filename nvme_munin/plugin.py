#!/usr/bin/env python3
"""
nvme-munin

Munin multigraph plugin for NVMe devices, based on nvme-cli.

Usage (as called by munin-node):
    nvme-munin autoconf   -> "yes" or "no (<reason>)"
    nvme-munin config     -> graph definitions and thresholds
    nvme-munin            -> current values

Thresholds are configured in plugin-conf.d, e.g.:

    [nvme]
    user root
    env.nvme_usage_nvme0n1_warning 90
    env.nvme_usage_nvme0n1_critical 95
    env.nvme_spare_SN_S464NB0K601188N_warning 20:

Diagnostics go to stderr, the exit code is always 0.
"""

from __future__ import annotations

import argparse
from typing import List, Optional, Sequence

from nvme_munin.config import get_settings
from nvme_munin.log import configure_logger
from nvme_munin.services import nvme_cli, nvme_monitor
from nvme_munin.services.report import render_autoconf, render_config, render_values
from nvme_munin.services.thresholds import ThresholdResolver

MODES = ("autoconf", "config", "print", "fetch")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nvme-munin",
        description="Munin plugin reporting NVMe usage, throughput, wear and spare capacity.",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        default="print",
        choices=MODES,
        help="autoconf, config or print (default: print; fetch is an alias)",
    )
    return parser.parse_args(argv)


def _emit(lines: List[str]) -> None:
    for line in lines:
        print(line)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    configure_logger(settings.log_level)

    devices = nvme_monitor.collect_devices()

    if args.mode == "autoconf":
        print(render_autoconf(nvme_cli.detect_availability(), devices))
        return 0

    if args.mode == "config":
        _emit(render_config(devices, ThresholdResolver(settings.thresholds)))
        if not settings.dirtyconfig:
            return 0

    _emit(render_values(nvme_monitor.with_health(devices)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
