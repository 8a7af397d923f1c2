from typing import Dict, Mapping, Optional
from pydantic import BaseModel, Field, field_validator
import os
from functools import lru_cache

_THRESHOLD_SUFFIXES = ("_warning", "_critical")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    # nvme-cli
    nvme_command: str = Field(
        default="nvme",
        description="Name or path of the nvme-cli binary",
    )
    modules_path: str = Field(
        default="/proc/modules",
        description="Pseudo-file listing the loaded kernel modules",
    )

    # Munin node capabilities / plugin environment
    dirtyconfig: bool = Field(
        default=False,
        description="True if munin-node accepts values together with the config output",
    )
    log_level: str = Field(
        default="WARNING",
        description="Level of the diagnostics written to stderr",
    )
    thresholds: Dict[str, str] = Field(
        default_factory=dict,
        description="Threshold overrides, e.g. {'nvme_usage_nvme0n1_warning': '90'}",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        # unknown levels, e.g. typos in plugin-conf.d, fall back to WARNING
        value = str(value).strip().upper()
        return value if value in _LOG_LEVELS else "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        # munin-node hands env.* lines of plugin-conf.d over as plain variables
        thresholds = {
            key: value
            for key, value in env.items()
            if key.endswith(_THRESHOLD_SUFFIXES) and value.strip()
        }

        log_level = env.get("NVME_MUNIN_LOG_LEVEL", "WARNING")
        if env.get("MUNIN_DEBUG") == "1":
            log_level = "DEBUG"

        return cls(
            nvme_command=env.get("NVME_COMMAND") or "nvme",
            modules_path=env.get("NVME_MODULES_PATH") or "/proc/modules",
            dirtyconfig=env.get("MUNIN_CAP_DIRTYCONFIG") == "1",
            log_level=log_level,
            thresholds=thresholds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
