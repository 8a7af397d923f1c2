import enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class DeviceRecord(BaseModel):
    """Domain model describing a single NVMe namespace."""

    model_config = ConfigDict(frozen=True)

    device_path: str = Field(
        ...,
        description="Device path, e.g. /dev/nvme0n1",
    )
    serial_number: str = Field(
        ...,
        description="Serial number of the controller, used as stable identity",
    )
    model: str = Field(
        ...,
        description="Model name as reported by nvme list",
    )
    namespace_id: int = Field(
        ...,
        ge=0,
        description="Namespace id on the controller",
    )
    usage_bytes: int = Field(
        ...,
        ge=0,
        description="Namespace utilisation in bytes",
    )
    capacity_bytes: int = Field(
        ...,
        ge=0,
        description="Namespace capacity in bytes",
    )
    health: Dict[str, str] = Field(
        default_factory=dict,
        description="smart-log values keyed by normalised metric name; empty until loaded",
    )

    @property
    def label(self) -> str:
        """Identity used as table key and as Munin field name."""
        return f"SN_{self.serial_number}"


class ThresholdPair(BaseModel):
    """Warning and critical threshold; None means no alerting."""

    model_config = ConfigDict(frozen=True)

    warning: Optional[str] = None
    critical: Optional[str] = None


class Availability(str, enum.Enum):
    AVAILABLE = "available"
    DRIVER_WITHOUT_TOOL = "driver_without_tool"
    UNAVAILABLE = "unavailable"
