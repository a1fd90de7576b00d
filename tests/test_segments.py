import pytest

from rhythm_pipeline.rhythm import RhythmLabel
from rhythm_pipeline.rpeak import detect_rpeaks
from rhythm_pipeline.segments import SegmentCollection, aggregate_segments


def _pairs(intervals):
    return [(round(i.start, 6), round(i.end, 6)) for i in intervals]


@pytest.mark.parametrize("beats", [[], [1.0]])
def test_fewer_than_two_beats_gives_empty_lists(beats):
    segments = aggregate_segments(beats)
    assert segments.n_intervals == 0
    assert segments.bradycardia == []
    assert segments.normal == []
    assert segments.tachycardia == []


def test_intervals_grouped_in_chronological_order():
    beats = [0.0, 1.0, 1.5, 2.0, 3.5, 4.3, 4.8]
    segments = aggregate_segments(beats)
    assert _pairs(segments.normal) == [(0.0, 1.0), (3.5, 4.3)]
    assert _pairs(segments.tachycardia) == [(1.0, 1.5), (1.5, 2.0), (4.3, 4.8)]
    assert _pairs(segments.bradycardia) == [(2.0, 3.5)]
    assert segments.counts() == {
        RhythmLabel.BRADYCARDIA: 1,
        RhythmLabel.NORMAL: 2,
        RhythmLabel.TACHYCARDIA: 3,
    }


def test_accepts_detection_result(periodic_signal):
    segments = aggregate_segments(detect_rpeaks(periodic_signal))
    assert _pairs(segments.normal) == [(1.0, 2.0), (2.0, 3.0), (3.0, 4.0)]
    assert segments.tachycardia == [] and segments.bradycardia == []


def test_repeated_beat_time_fails_explicitly():
    with pytest.raises(ValueError):
        aggregate_segments([1.0, 1.0])


def test_to_frame_sorted_by_start():
    df = aggregate_segments([0.0, 1.0, 1.5, 3.0]).to_frame()
    assert df["start"].tolist() == [0.0, 1.0, 1.5]
    assert df["label"].tolist() == ["Normal", "Tachycardia", "Bradycardia"]
    assert df["heart_rate"].iloc[1] == pytest.approx(120.0)


def test_empty_frame_has_columns():
    df = SegmentCollection().to_frame()
    assert list(df.columns) == ["start", "end", "duration", "heart_rate", "label"]
    assert len(df) == 0


def test_returned_lists_are_copies():
    segments = aggregate_segments([0.0, 1.0])
    segments.normal.clear()
    assert len(segments.normal) == 1
