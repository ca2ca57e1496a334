"""Onset detection result models."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class NoOnset(BaseModel):
    """No transition into precipitation within the forecast horizon."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["no_onset"] = "no_onset"
    summary: str = Field(..., description="Provider summary to show instead of an alert")

    @property
    def text(self) -> str:
        return self.summary


class OnsetFound(BaseModel):
    """First forecast minute whose probability crosses the alert threshold."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["onset_found"] = "onset_found"
    lead_minutes: float = Field(..., gt=0, description="Minutes from the anchor to the onset")
    precipitation_type: Optional[str] = Field(
        default=None, description="Precipitation category of the onset sample",
    )
    intensity: float = Field(..., description="Precipitation intensity of the onset sample")
    probability: float = Field(..., description="Precipitation probability of the onset sample")
    onset_time: datetime = Field(..., description="Time of the onset sample (UTC)")
    message: str = Field(..., description="Human-readable alert message")

    @property
    def text(self) -> str:
        return self.message


OnsetResult = Annotated[Union[NoOnset, OnsetFound], Field(discriminator="kind")]


__all__ = ["NoOnset", "OnsetFound", "OnsetResult"]
