import posixpath
from typing import Mapping, Optional

from nvme_munin.models.nvme import ThresholdPair


class ThresholdResolver:
    """
    Resolve warning/critical thresholds for one metric of one device.

    Lookup order, the last match wins:

    1. the defaults passed by the caller,
    2. ``<metric>_<device name>_warning`` (e.g. ``nvme_usage_nvme0n1_warning``),
    3. ``<metric>_<label>_warning`` (e.g. ``nvme_usage_SN_S464NB0K601188N_warning``).

    The same goes for ``_critical``. Device names can change between boots,
    serial numbers cannot.
    """

    def __init__(self, lookup: Mapping[str, str]) -> None:
        self._lookup = lookup

    def _override(self, key: str, current: Optional[str]) -> Optional[str]:
        value = self._lookup.get(key)
        return current if value is None else value

    def resolve(
        self,
        metric: str,
        device_path: str,
        label: str,
        default_warning: Optional[str] = None,
        default_critical: Optional[str] = None,
    ) -> ThresholdPair:
        warning, critical = default_warning, default_critical
        for identity in (posixpath.basename(device_path), label):
            prefix = f"{metric}_{identity}"
            warning = self._override(f"{prefix}_warning", warning)
            critical = self._override(f"{prefix}_critical", critical)
        return ThresholdPair(warning=warning, critical=critical)
