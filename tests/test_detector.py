import pytest

from rainalert.errors import InvalidSampleOrder
from rainalert.models.forecast import CurrentConditions, ForecastSample, PrecipitationType
from rainalert.models.onset import NoOnset, OnsetFound
from rainalert.services.detector import OnsetDetector, detect, format_onset_message


def _sample(timestamp, probability, intensity=0.0, precip_type=None):
    return ForecastSample(
        timestamp=timestamp,
        precipitation_probability=probability,
        precipitation_intensity=intensity,
        precipitation_type=precip_type,
    )


def _current(probability=0.1, summary="Clear for the hour."):
    return CurrentConditions(precipitation_probability=probability, fallback_summary=summary)


def test_first_crossing_wins_over_higher_probability():
    samples = [
        _sample(1000, 0.0),
        _sample(1060, 0.25, 0.4, PrecipitationType.RAIN),
        _sample(1120, 0.9, 2.5, PrecipitationType.SNOW),
    ]

    result = detect(_current(0.1), samples)

    assert isinstance(result, OnsetFound)
    assert result.lead_minutes == 1.0
    assert result.probability == 0.25
    assert result.intensity == 0.4
    assert result.precipitation_type == "rain"
    assert result.message == "Rain starting in 1 mins"


def test_lead_time_arithmetic():
    samples = [_sample(1000, 0.0), _sample(1180, 0.5, precip_type=PrecipitationType.RAIN)]

    result = detect(_current(), samples)

    assert isinstance(result, OnsetFound)
    assert result.lead_minutes == 3.0
    assert result.message == "Rain starting in 3 mins"
    assert result.onset_time.timestamp() == 1180


def test_fractional_lead_time_is_kept():
    samples = [_sample(1000, 0.0), _sample(1150, 0.5, precip_type=PrecipitationType.SLEET)]

    result = detect(_current(), samples)

    assert result.lead_minutes == 2.5
    assert result.message == "Sleet starting in 2.5 mins"


def test_probability_equal_to_threshold_does_not_qualify():
    samples = [_sample(1000, 0.0), _sample(1060, 0.2), _sample(1120, 0.2)]

    result = detect(_current(), samples, threshold=0.2)

    assert result == NoOnset(summary="Clear for the hour.")


def test_probability_just_above_threshold_qualifies():
    samples = [_sample(1000, 0.0), _sample(1060, 0.2 + 1e-9)]

    result = detect(_current(), samples, threshold=0.2)

    assert isinstance(result, OnsetFound)
    assert result.lead_minutes == 1.0


def test_already_raining_suppresses_onset():
    samples = [_sample(1000, 0.9), _sample(1060, 0.95, precip_type=PrecipitationType.RAIN)]

    result = detect(_current(0.2, summary="Rain for the hour."), samples)

    assert result == NoOnset(summary="Rain for the hour.")
    assert result.text == "Rain for the hour."


def test_anchor_timestamp_is_never_an_onset():
    samples = [
        _sample(1000, 0.8, precip_type=PrecipitationType.RAIN),
        _sample(1000, 0.7, precip_type=PrecipitationType.RAIN),
        _sample(1060, 0.1),
    ]

    result = detect(_current(0.0), samples)

    assert isinstance(result, NoOnset)


def test_anchor_duplicates_are_skipped_before_later_onset():
    samples = [
        _sample(1000, 0.8),
        _sample(1000, 0.8),
        _sample(1120, 0.3, precip_type=PrecipitationType.RAIN),
    ]

    result = detect(_current(0.0), samples)

    assert isinstance(result, OnsetFound)
    assert result.lead_minutes == 2.0


def test_empty_series_returns_fallback_summary():
    result = detect(_current(summary="Nothing expected."), [])

    assert result == NoOnset(summary="Nothing expected.")


def test_all_samples_below_threshold():
    samples = [_sample(1000 + 60 * i, 0.05) for i in range(61)]

    assert detect(_current(), samples) == NoOnset(summary="Clear for the hour.")


def test_missing_type_uses_generic_label():
    samples = [_sample(1000, 0.0), _sample(1300, 0.6, 0.2, None)]

    result = detect(_current(), samples)

    assert result.precipitation_type is None
    assert result.message == "Precipitation starting in 5 mins"


def test_unknown_type_uses_generic_label():
    assert format_onset_message("unknown", 4.0) == "Precipitation starting in 4 mins"
    assert format_onset_message("none", 4.0) == "Precipitation starting in 4 mins"


def test_unclassified_provider_type_keeps_its_name():
    samples = [
        _sample(1000, 0.0),
        ForecastSample(
            timestamp=1060,
            precipitation_probability=0.7,
            precipitation_type=PrecipitationType.UNKNOWN,
            provider_type="hail",
        ),
    ]

    result = detect(_current(), samples)

    assert result.precipitation_type == "hail"
    assert result.message == "Hail starting in 1 mins"


def test_timestamp_outside_datetime_range_is_rejected():
    with pytest.raises(ValueError):
        _sample(10**13, 0.9)


def test_custom_generic_label():
    detector = OnsetDetector(0.2, generic_label="Something wet")
    samples = [_sample(1000, 0.0), _sample(1060, 0.6)]

    assert detector.detect(_current(), samples).message == "Something wet starting in 1 mins"


def test_detection_is_idempotent():
    samples = [_sample(1000, 0.0), _sample(1060, 0.6, 1.1, PrecipitationType.RAIN)]
    current = _current()

    first = detect(current, samples)
    second = detect(current, samples)

    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_out_of_order_samples_raise():
    samples = [_sample(1000, 0.0), _sample(1120, 0.1), _sample(1060, 0.5)]

    with pytest.raises(InvalidSampleOrder) as exc_info:
        detect(_current(), samples)

    assert exc_info.value.index == 2


def test_threshold_is_configurable():
    samples = [_sample(1000, 0.0), _sample(1060, 0.3), _sample(1120, 0.6)]

    result = detect(_current(0.1), samples, threshold=0.5)

    assert result.lead_minutes == 2.0
    assert result.probability == 0.6


@pytest.mark.parametrize("threshold", [-0.1, 1.5])
def test_threshold_outside_unit_range_is_rejected(threshold):
    with pytest.raises(ValueError):
        OnsetDetector(threshold)
