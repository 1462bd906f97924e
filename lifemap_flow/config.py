"""Runtime configuration read from environment variables / .env file."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lifemap_flow.flow import DEFAULT_PASSES
from lifemap_flow.weights import DEFAULT_PER_UNIT, DEFAULT_WEIGHT_POINTS, WeightPolicy

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"


class FlowSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    passes: int = Field(DEFAULT_PASSES, alias="LIFEMAP_FLOW_PASSES")
    tolerance: Optional[float] = Field(None, alias="LIFEMAP_FLOW_TOLERANCE")
    weight_points: dict[int, float] = Field(
        default_factory=lambda: dict(DEFAULT_WEIGHT_POINTS), alias="LIFEMAP_WEIGHT_POINTS"
    )
    weight_per_unit: float = Field(DEFAULT_PER_UNIT, alias="LIFEMAP_WEIGHT_PER_UNIT")
    log_level: str = Field("INFO", alias="LIFEMAP_LOG_LEVEL")

    @field_validator("passes")
    @classmethod
    def _passes_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("LIFEMAP_FLOW_PASSES must be at least 1")
        return value

    def weight_policy(self) -> WeightPolicy:
        return WeightPolicy(points=dict(self.weight_points), per_unit=self.weight_per_unit)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for scripts and demos."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
