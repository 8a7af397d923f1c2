import re
from decimal import Decimal

from nvme_munin.errors import UnknownSizeUnitError

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s+(\S+)\s*$")

# nvme list prints SI units; "B" shows up for empty namespaces ("0.00   B")
_UNITS = {
    "B": 1,
    "kB": 1000,
    "MB": 1000**2,
    "GB": 1000**3,
    "TB": 1000**4,
    "PB": 1000**5,
}


def parse_size(text: str) -> int:
    """
    Convert a size such as "695.50 GB" into a byte count.

    The result is truncated, not rounded. Anything that is not a number
    followed by one of B/kB/MB/GB/TB/PB raises UnknownSizeUnitError.
    """
    match = _SIZE_PATTERN.match(text)
    if not match or match.group(2) not in _UNITS:
        raise UnknownSizeUnitError(text)

    number, unit = match.groups()
    return int(Decimal(number) * _UNITS[unit])
