from typing import Dict, List

from nvme_munin.models.nvme import DeviceRecord
from nvme_munin.services import nvme_cli
from nvme_munin.services.inventory import parse_health, parse_inventory


def collect_devices() -> Dict[str, DeviceRecord]:
    """
    Build the device table for this run from `nvme list`.

    Health values are not loaded yet; see with_health(). If nvme-cli is
    missing the table is empty.
    """
    return parse_inventory(nvme_cli.run("list"))


def with_health(devices: Dict[str, DeviceRecord]) -> Dict[str, DeviceRecord]:
    """
    Return a copy of *devices* with the smart-log of every device loaded.

    nvme smart-log is called once per device, one after the other.
    """
    loaded: Dict[str, DeviceRecord] = {}
    for label, device in devices.items():
        health = parse_health(nvme_cli.run("smart-log", device.device_path))
        loaded[label] = device.model_copy(update={"health": health})
    return loaded


def get_nvme_status() -> List[DeviceRecord]:
    """All NVMe namespaces of the host including their smart-log, by label."""
    devices = with_health(collect_devices())
    return [devices[label] for label in sorted(devices)]
