"""Rain onset detection over a minute-level precipitation forecast."""

from __future__ import annotations

import logging
from typing import Sequence

from rainalert.errors import InvalidSampleOrder
from rainalert.models.forecast import CurrentConditions, ForecastSample, PrecipitationType
from rainalert.models.onset import NoOnset, OnsetFound, OnsetResult

logger = logging.getLogger("rainalert.services.detector")

DEFAULT_THRESHOLD = 0.2
GENERIC_LABEL = "Precipitation"

# Categories that carry no useful name for a message.
_UNLABELLED_TYPES = {PrecipitationType.NONE.value, PrecipitationType.UNKNOWN.value}


def _check_threshold(threshold: float) -> float:
    threshold = float(threshold)
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
    return threshold


def check_sample_order(samples: Sequence[ForecastSample]) -> None:
    """Raise ``InvalidSampleOrder`` if timestamps ever decrease."""

    for index in range(1, len(samples)):
        previous = samples[index - 1].timestamp
        current = samples[index].timestamp
        if current < previous:
            raise InvalidSampleOrder(index, previous, current)


def precipitation_label(type_name: str | None, generic_label: str = GENERIC_LABEL) -> str:
    text = (type_name or "").strip()
    if not text or text.lower() in _UNLABELLED_TYPES:
        return generic_label
    return text.title()


def format_lead_minutes(lead_minutes: float) -> str:
    return f"{lead_minutes:g}"


def format_onset_message(
    type_name: str | None,
    lead_minutes: float,
    generic_label: str = GENERIC_LABEL,
) -> str:
    """Build e.g. ``"Rain starting in 3 mins"``."""

    label = precipitation_label(type_name, generic_label)
    return f"{label} starting in {format_lead_minutes(lead_minutes)} mins"


def find_onset_sample(
    samples: Sequence[ForecastSample], threshold: float
) -> ForecastSample | None:
    """Return the earliest sample after the anchor minute whose probability exceeds ``threshold``."""

    if not samples:
        return None

    anchor = samples[0]
    for sample in samples:
        if sample.timestamp == anchor.timestamp:
            continue
        if sample.precipitation_probability > threshold:
            return sample
    return None


class OnsetDetector:
    """Detect transitions into precipitation using a fixed alert threshold.

    Only transitions are reported: when the current probability already meets
    the threshold, the provider summary is returned instead. Otherwise the
    first future minute strictly above the threshold wins, even when a later
    minute has a higher probability.
    """

    def __init__(
        self, threshold: float = DEFAULT_THRESHOLD, *, generic_label: str = GENERIC_LABEL
    ) -> None:
        self.threshold = _check_threshold(threshold)
        self.generic_label = generic_label or GENERIC_LABEL

    def detect(
        self, current: CurrentConditions, samples: Sequence[ForecastSample]
    ) -> OnsetResult:
        if current.precipitation_probability >= self.threshold:
            logger.debug(
                "Current probability %.2f already at threshold %.2f; no onset",
                current.precipitation_probability,
                self.threshold,
            )
            return NoOnset(summary=current.fallback_summary)

        check_sample_order(samples)

        onset = find_onset_sample(samples, self.threshold)
        if onset is None:
            return NoOnset(summary=current.fallback_summary)

        anchor = samples[0]
        lead_minutes = (onset.timestamp - anchor.timestamp) / 60
        result = OnsetFound(
            lead_minutes=lead_minutes,
            precipitation_type=onset.type_name,
            intensity=onset.precipitation_intensity,
            probability=onset.precipitation_probability,
            onset_time=onset.time,
            message=format_onset_message(
                onset.type_name, lead_minutes, self.generic_label
            ),
        )
        logger.info(
            "Onset detected: type=%s probability=%.2f intensity=%.3f lead=%s min",
            result.precipitation_type,
            result.probability,
            result.intensity,
            format_lead_minutes(lead_minutes),
        )
        return result


def detect(
    current: CurrentConditions,
    samples: Sequence[ForecastSample],
    threshold: float = DEFAULT_THRESHOLD,
) -> OnsetResult:
    """Detect the first precipitation onset in ``samples``."""

    return OnsetDetector(threshold).detect(current, samples)


__all__ = [
    "DEFAULT_THRESHOLD",
    "GENERIC_LABEL",
    "OnsetDetector",
    "check_sample_order",
    "detect",
    "find_onset_sample",
    "format_onset_message",
]
