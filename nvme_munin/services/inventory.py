import re
from typing import Dict, Iterable, Optional

from nvme_munin.log import logger
from nvme_munin.models.nvme import DeviceRecord
from nvme_munin.services.units import parse_size

# Header of `nvme list`, nvme-cli 1.x and 2.x (the latter adds "Generic"):
# Node             SN                   Model                                    Namespace Usage                      Format           FW Rev
# ---------------- -------------------- ---------------------------------------- --------- -------------------------- ---------------- --------
# /dev/nvme1n1     S464NB0K601188N      Samsung SSD 970 EVO 2TB                  1         695.50  GB /   2.00  TB    512   B +  0 B   1B2QEXE7
_HEADER_PATTERN = re.compile(r"^Node\s+(?:Generic\s+)?SN\s+Model\s+Namespace\s+Usage")

_ROW_PATTERN = re.compile(
    r"^(?P<device>/\S+)\s+"
    r"(?:(?P<generic>/\S+)\s+)?"
    r"(?P<serial>\S+)\s+"
    r"(?P<model>\S.*\S)\s{3,}"
    r"(?P<namespace>0x[0-9a-fA-F]+|\d+)\s+"
    r"(?P<usage>[\d.]+\s+\S*B)\s+/\s+"
    r"(?P<capacity>[\d.]+\s+\S*B)"
)

# Header and the dashed separator line
_PREAMBLE_LINES = 2

_HEALTH_HEADER = "Smart Log"
_HEALTH_PATTERN = re.compile(r"^\s*(?P<label>\S.*?)\s+:\s*(?P<value>.*?)\s*$")
# nvme-cli 2.x appends a human readable size, e.g. "12,345,678 [6.32 TB]"
_ANNOTATED_COUNTER = re.compile(r"^(?P<number>[\d,]+)\s+[\[(].*[\])]$")
_GROUPED_INTEGER = re.compile(r"^\d+(?:,\d{3})+$")


def is_inventory_header(line: str) -> bool:
    """True if *line* is the column header of `nvme list`."""
    return bool(_HEADER_PATTERN.match(line))


def match_inventory_row(line: str) -> Optional[re.Match]:
    """Match one device row of `nvme list`, or return None."""
    return _ROW_PATTERN.match(line)


def _parse_namespace_id(text: str) -> int:
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text)


def _record_from_row(match: re.Match) -> DeviceRecord:
    return DeviceRecord(
        device_path=match.group("device"),
        serial_number=match.group("serial"),
        model=match.group("model"),
        namespace_id=_parse_namespace_id(match.group("namespace")),
        usage_bytes=parse_size(match.group("usage")),
        capacity_bytes=parse_size(match.group("capacity")),
    )


def parse_inventory(lines: Iterable[str]) -> Dict[str, DeviceRecord]:
    """
    Parse `nvme list` output into a table keyed by "SN_<serial>".

    Output in an unknown layout does not raise: a warning is logged and the
    rows that could be parsed are returned. A header without rows means the
    host simply has no NVMe devices.
    """
    devices: Dict[str, DeviceRecord] = {}
    header_seen = False
    drift = False
    lineno = 0

    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        if is_inventory_header(line):
            header_seen = True
            continue
        match = match_inventory_row(line)
        if match:
            record = _record_from_row(match)
            devices[record.label] = record
        elif lineno > _PREAMBLE_LINES:
            drift = True
            logger.debug("unrecognised nvme list line %d: %r", lineno, line)

    if lineno and (drift or not header_seen):
        logger.warning(
            "could not recognise output from 'nvme list', "
            "the nvme-cli version is probably not supported; please report"
        )

    return devices


def _normalise_value(value: str) -> str:
    annotated = _ANNOTATED_COUNTER.match(value)
    if annotated:
        value = annotated.group("number")
    if _GROUPED_INTEGER.match(value):
        value = value.replace(",", "")
    return value


def parse_health(lines: Iterable[str]) -> Dict[str, str]:
    """Parse `nvme smart-log <device>` into {"data_units_read": "12345", ...}."""
    health: Dict[str, str] = {}
    for line in lines:
        if line.startswith(_HEALTH_HEADER):
            continue
        match = _HEALTH_PATTERN.match(line)
        if not match:
            continue
        key = re.sub(r"\s+", "_", match.group("label")).lower()
        health[key] = _normalise_value(match.group("value"))
    return health
