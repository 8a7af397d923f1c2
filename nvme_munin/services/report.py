"""
Render the device table in the Munin multigraph protocol.

Four graphs are produced, one line block per device in each of them:

    nvme_usage        namespace usage in percent
    nvme_bytes        data units read / written (counters)
    nvme_writecycles  lifetime writes divided by capacity
    nvme_spare        available spare in percent

``render_config`` emits the graph definitions, ``render_values`` the current
readings and ``render_autoconf`` the answer to munin-node's autoconf probe.
"""

from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from nvme_munin.log import logger
from nvme_munin.models.nvme import Availability, DeviceRecord
from nvme_munin.services.thresholds import ThresholdResolver

# One smart-log data unit. nvme-cli documents it as "1000 units of 512
# bytes"; not verified against vendor documentation.
DATA_UNIT_BYTES = 512000

USAGE_GRAPH = "nvme_usage"
BYTES_GRAPH = "nvme_bytes"
WRITECYCLES_GRAPH = "nvme_writecycles"
SPARE_GRAPH = "nvme_spare"

_AUTOCONF_REASONS = {
    Availability.AVAILABLE: "no devices to monitor",
    Availability.DRIVER_WITHOUT_TOOL: (
        "nvme kernel module loaded but 'nvme' command not found"
    ),
    Availability.UNAVAILABLE: "'nvme' command not found",
}


def _sorted_devices(devices: Mapping[str, DeviceRecord]) -> List[DeviceRecord]:
    return [devices[label] for label in sorted(devices)]


def _graph_header(name: str, attributes: Sequence[tuple]) -> List[str]:
    lines = [f"multigraph {name}"]
    lines.extend(f"{key} {value}" for key, value in attributes if value != "")
    return lines


def _field(field: str, attributes: Sequence[tuple]) -> List[str]:
    return [f"{field}.{key} {value}" for key, value in attributes]


def _thresholds(
    resolver: ThresholdResolver,
    graph: str,
    device: DeviceRecord,
    default_warning: Optional[str] = None,
    default_critical: Optional[str] = None,
) -> List[str]:
    pair = resolver.resolve(
        graph, device.device_path, device.label, default_warning, default_critical
    )
    lines = []
    if pair.warning is not None:
        lines.append(f"{device.label}.warning {pair.warning}")
    if pair.critical is not None:
        lines.append(f"{device.label}.critical {pair.critical}")
    return lines


def render_config(
    devices: Mapping[str, DeviceRecord], resolver: ThresholdResolver
) -> List[str]:
    """Graph and field definitions for all four graphs."""
    ordered = _sorted_devices(devices)
    labels = " ".join(device.label for device in ordered)
    lines: List[str] = []

    lines += _graph_header(
        USAGE_GRAPH,
        [
            ("graph_title", "NVMe Namespace Usage"),
            ("graph_order", labels),
            ("graph_vlabel", "Percent used"),
            ("graph_scale", "no"),
            ("graph_category", "disk"),
            ("graph_info", "How much space is used"),
        ],
    )
    for device in ordered:
        lines += _field(
            device.label,
            [
                ("label", f"{device.device_path} used"),
                ("type", "GAUGE"),
                ("min", 0),
                ("max", 100),
            ],
        )
        lines += _thresholds(resolver, USAGE_GRAPH, device, "95", "98")

    byte_fields = " ".join(
        f"{device.label}_r {device.label}_w" for device in ordered
    )
    lines += _graph_header(
        BYTES_GRAPH,
        [
            ("graph_title", "NVMe Bytes Read / Written"),
            ("graph_order", byte_fields),
            ("graph_vlabel", "units read (-) / written (+) per ${graph_period}"),
            ("graph_category", "disk"),
            (
                "graph_info",
                f"How much data is read and written, in units of {DATA_UNIT_BYTES} bytes",
            ),
            ("graph_period", "second"),
        ],
    )
    for device in ordered:
        lines += _field(
            f"{device.label}_r",
            [
                ("label", device.device_path),
                ("type", "COUNTER"),
                ("min", 0),
                ("graph", "no"),
            ],
        )
        lines += _field(
            f"{device.label}_w",
            [
                ("label", device.device_path),
                ("type", "COUNTER"),
                ("min", 0),
                ("negative", f"{device.label}_r"),
            ],
        )

    lines += _graph_header(
        WRITECYCLES_GRAPH,
        [
            ("graph_title", "NVMe Write Cycles"),
            ("graph_order", labels),
            ("graph_vlabel", "Cycles"),
            ("graph_args", "--logarithmic"),
            ("graph_category", "disk"),
            (
                "graph_info",
                "How much data has been written in the lifetime of the device "
                "divided by its capacity",
            ),
        ],
    )
    for device in ordered:
        lines += _field(
            device.label,
            [("label", device.device_path), ("type", "GAUGE"), ("min", 0)],
        )
        lines += _thresholds(resolver, WRITECYCLES_GRAPH, device)

    lines += _graph_header(
        SPARE_GRAPH,
        [
            ("graph_title", "NVMe Available Spare"),
            ("graph_order", labels),
            ("graph_vlabel", "Percent"),
            ("graph_category", "disk"),
            ("graph_info", "Spare capacity left for wear levelling"),
        ],
    )
    for device in ordered:
        lines += _field(
            device.label,
            [
                ("label", device.device_path),
                ("type", "GAUGE"),
                ("min", 0),
                ("max", 100),
            ],
        )
        lines += _thresholds(resolver, SPARE_GRAPH, device, "10:", "3:")

    return lines


def _health_int(device: DeviceRecord, key: str) -> Optional[int]:
    value = device.health.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.debug("%s: %s is not a counter: %r", device.device_path, key, value)
        return None


def _spare_percent(device: DeviceRecord) -> Optional[str]:
    value = device.health.get("available_spare")
    if value is None:
        return None
    value = value.rstrip().rstrip("%").strip()
    try:
        float(value)
    except ValueError:
        logger.debug("%s: unexpected available_spare %r", device.device_path, value)
        return None
    return value


def format_number(value: float) -> str:
    """Plain decimal notation, e.g. 5.12e-07 becomes 0.000000512."""
    text = repr(value)
    if "e" not in text and "E" not in text:
        return text
    return format(Decimal(text), "f")


def usage_percent(device: DeviceRecord) -> Optional[float]:
    if not device.capacity_bytes:
        return None
    return 100 * device.usage_bytes / device.capacity_bytes


def write_cycles(device: DeviceRecord) -> Optional[float]:
    """Average program/erase cycles per cell over the device lifetime."""
    written = _health_int(device, "data_units_written")
    if written is None or not device.capacity_bytes:
        return None
    return written * DATA_UNIT_BYTES / device.capacity_bytes


def render_values(devices: Mapping[str, DeviceRecord]) -> List[str]:
    """Current readings; health must already be loaded into the records."""
    ordered = _sorted_devices(devices)
    lines: List[str] = []

    lines.append(f"multigraph {USAGE_GRAPH}")
    for device in ordered:
        percent = usage_percent(device)
        if percent is not None:
            lines.append(f"{device.label}.value {format_number(percent)}")

    lines.append(f"multigraph {BYTES_GRAPH}")
    for device in ordered:
        counters: Dict[str, Optional[int]] = {
            "r": _health_int(device, "data_units_read"),
            "w": _health_int(device, "data_units_written"),
        }
        for suffix, value in counters.items():
            if value is not None:
                lines.append(f"{device.label}_{suffix}.value {value}")

    lines.append(f"multigraph {WRITECYCLES_GRAPH}")
    for device in ordered:
        cycles = write_cycles(device)
        if cycles is not None:
            lines.append(f"{device.label}.value {format_number(cycles)}")

    lines.append(f"multigraph {SPARE_GRAPH}")
    for device in ordered:
        spare = _spare_percent(device)
        if spare is not None:
            lines.append(f"{device.label}.value {spare}")

    return lines


def render_autoconf(
    availability: Availability, devices: Mapping[str, DeviceRecord]
) -> str:
    if devices:
        return "yes"
    return f"no ({_AUTOCONF_REASONS[availability]})"
