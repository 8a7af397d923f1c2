import logging
from types import SimpleNamespace

import pytest

from nvme_munin.config import get_settings
from nvme_munin.log import logger

NVME_LIST = [
    "Node             SN                   Model                                    Namespace Usage                      Format           FW Rev",
    "---------------- -------------------- ---------------------------------------- --------- -------------------------- ---------------- --------",
    "/dev/nvme0n1     S4EWNX0R123456       Samsung SSD 980 1TB                      1         120.03  GB /   1.00  TB    512   B +  0 B   1B4QFXO7",
    "/dev/nvme1n1     S464NB0K601188N      Samsung SSD 970 EVO 2TB                  1         695.50  GB /   2.00  TB    512   B +  0 B   1B2QEXE7",
]

NVME_LIST_V2 = [
    "Node                  Generic               SN                   Model                                    Namespace  Usage                      Format           FW Rev",
    "--------------------- --------------------- -------------------- ---------------------------------------- ---------- -------------------------- ---------------- --------",
    "/dev/nvme0n1          /dev/ng0n1            PHBT1234005V016D     INTEL MEMPEK1W016GA                      0x1         14.40  GB /  14.40  GB    512   B +  0 B   K3110310",
]

SMART_LOG = [
    "Smart Log for NVME device:nvme1n1 namespace-id:ffffffff",
    "critical_warning                    : 0",
    "temperature                         : 35 C (308 Kelvin)",
    "available_spare                     : 100%",
    "available_spare_threshold           : 10%",
    "percentage_used                     : 2%",
    "data_units_read                     : 12,345,678",
    "data_units_written                  : 23,456,789",
    "host_read_commands                  : 198,765,432",
    "power_on_hours                      : 1,234",
    "unsafe_shutdowns                    : 17",
]


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logger():
    """plugin.main() points the logger at the stderr of the running test."""
    yield
    logger.handlers = []
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_nvme(monkeypatch):
    """
    Replace nvme_cli.run with canned output.

    The returned namespace holds the responses, keyed by the argument tuple,
    and the list of calls made.
    """
    from nvme_munin.services import nvme_cli

    responses = {
        ("list",): NVME_LIST,
        ("smart-log", "/dev/nvme0n1"): [
            "Smart Log for NVME device:nvme0n1 namespace-id:ffffffff",
            "available_spare                     : 95%",
            "data_units_read                     : 1,000",
            "data_units_written                  : 2,000",
        ],
        ("smart-log", "/dev/nvme1n1"): SMART_LOG,
    }
    calls = []

    def fake_run(subcommand, *args):
        calls.append((subcommand, *args))
        return list(responses.get((subcommand, *args), []))

    monkeypatch.setattr(nvme_cli, "run", fake_run)
    return SimpleNamespace(responses=responses, calls=calls)
