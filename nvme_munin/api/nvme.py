from typing import Dict, List

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse

from nvme_munin.config import get_settings
from nvme_munin.models.nvme import DeviceRecord
from nvme_munin.services import nvme_cli, nvme_monitor
from nvme_munin.services.report import render_autoconf, render_config, render_values
from nvme_munin.services.thresholds import ThresholdResolver

router = APIRouter()


@router.get(
    "/status",
    response_model=List[DeviceRecord],
    summary="NVMe status",
)
def nvme_status() -> List[DeviceRecord]:
    """
    Return inventory and smart-log values for all NVMe namespaces of the host.

    In case of NVMe-related runtime errors (e.g. an unknown size unit in the
    `nvme list` output), a HTTP 503 Service Unavailable is returned.
    """
    try:
        return nvme_monitor.get_nvme_status()
    except RuntimeError as exc:
        raise HTTPException(
            status_code=503,
            detail=str(exc),
        ) from exc


@router.get(
    "/report",
    response_class=PlainTextResponse,
    summary="Munin report",
)
def nvme_report(
    mode: str = Query("values", pattern="^(config|values)$"),
) -> str:
    """
    Return the same text the Munin plugin prints, either the graph
    definitions (mode=config) or the current values (mode=values).
    """
    try:
        devices = nvme_monitor.collect_devices()
        if mode == "config":
            lines = render_config(devices, ThresholdResolver(get_settings().thresholds))
        else:
            lines = render_values(nvme_monitor.with_health(devices))
    except RuntimeError as exc:
        raise HTTPException(
            status_code=503,
            detail=str(exc),
        ) from exc
    return "".join(f"{line}\n" for line in lines)


@router.get("/availability", summary="nvme-cli availability")
def nvme_availability() -> Dict[str, str]:
    """Answer of the autoconf probe, plus the raw availability state."""
    try:
        availability = nvme_cli.detect_availability()
        devices = nvme_monitor.collect_devices()
    except RuntimeError as exc:
        raise HTTPException(
            status_code=503,
            detail=str(exc),
        ) from exc
    return {
        "availability": availability.value,
        "autoconf": render_autoconf(availability, devices),
    }
