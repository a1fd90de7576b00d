import math

import pytest

from rhythm_pipeline.config import Config
from rhythm_pipeline.rhythm import (
    RhythmLabel,
    RRInterval,
    classify_rr_interval,
    compute_heart_rate,
)


@pytest.mark.parametrize(
    "rr, expected",
    [
        (1.0, RhythmLabel.NORMAL),       # 60 bpm, lower limit
        (0.6, RhythmLabel.NORMAL),       # 100 bpm, upper limit
        (0.8, RhythmLabel.NORMAL),
        (0.5, RhythmLabel.TACHYCARDIA),  # 120 bpm
        (1.2, RhythmLabel.BRADYCARDIA),  # 50 bpm
    ],
)
def test_classify_rr_interval(rr, expected):
    assert classify_rr_interval(rr) is expected


def test_heart_rate():
    assert compute_heart_rate(0.75) == pytest.approx(80.0)


@pytest.mark.parametrize("rr", [0.0, -0.5, math.nan, math.inf])
def test_invalid_duration_raises(rr):
    with pytest.raises(ValueError):
        classify_rr_interval(rr)


def test_custom_limits():
    config = Config(BRADYCARDIA_HR=50.0, TACHYCARDIA_HR=90.0)
    assert classify_rr_interval(1.1, config) is RhythmLabel.NORMAL       # ~54.5 bpm
    assert classify_rr_interval(0.65, config) is RhythmLabel.TACHYCARDIA  # ~92.3 bpm


def test_rr_interval_properties():
    interval = RRInterval(start=2.0, end=2.5)
    assert interval.duration == pytest.approx(0.5)
    assert interval.heart_rate == pytest.approx(120.0)
    assert interval.label is RhythmLabel.TACHYCARDIA
    assert interval.format() == "2.000000 2.500000"
    assert interval.format(2) == "2.00 2.50"


def test_rr_interval_must_move_forward():
    with pytest.raises(ValueError):
        RRInterval(start=3.0, end=3.0)


def test_label_string_values():
    assert [str(label) for label in RhythmLabel] == ["Bradycardia", "Normal", "Tachycardia"]
