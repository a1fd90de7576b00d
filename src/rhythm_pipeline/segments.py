"""
Segment aggregation.

Groups consecutive-beat RR intervals by rhythm category while keeping the
chronological order inside each category.
"""

from typing import Dict, List, Sequence, Union

import numpy as np
import pandas as pd

from .config import Config, default_config
from .rhythm import RhythmLabel, RRInterval
from .rpeak import DetectionResult


class SegmentCollection:
    """Three chronological RR interval lists keyed by rhythm category."""

    def __init__(self):
        self._intervals: Dict[RhythmLabel, List[RRInterval]] = {
            label: [] for label in RhythmLabel
        }

    def add(self, interval: RRInterval, label: RhythmLabel) -> None:
        self._intervals[label].append(interval)

    def intervals(self, label: RhythmLabel) -> List[RRInterval]:
        """Intervals of one category, in the order they were produced."""
        return list(self._intervals[label])

    @property
    def bradycardia(self) -> List[RRInterval]:
        return self.intervals(RhythmLabel.BRADYCARDIA)

    @property
    def normal(self) -> List[RRInterval]:
        return self.intervals(RhythmLabel.NORMAL)

    @property
    def tachycardia(self) -> List[RRInterval]:
        return self.intervals(RhythmLabel.TACHYCARDIA)

    @property
    def n_intervals(self) -> int:
        return sum(len(v) for v in self._intervals.values())

    def counts(self) -> Dict[RhythmLabel, int]:
        """Number of intervals per category."""
        return {label: len(v) for label, v in self._intervals.items()}

    def to_frame(self) -> pd.DataFrame:
        """All intervals as a chronologically sorted DataFrame."""
        rows = [
            {
                "start": interval.start,
                "end": interval.end,
                "duration": interval.duration,
                "heart_rate": interval.heart_rate,
                "label": label.value,
            }
            for label, intervals in self._intervals.items()
            for interval in intervals
        ]
        columns = ["start", "end", "duration", "heart_rate", "label"]
        df = pd.DataFrame(rows, columns=columns)
        return df.sort_values("start", kind="stable").reset_index(drop=True)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SegmentCollection):
            return NotImplemented
        return self._intervals == other._intervals

    def __repr__(self) -> str:
        counts = ", ".join(f"{label.value}={n}" for label, n in self.counts().items())
        return f"SegmentCollection({counts})"


def aggregate_segments(
    beats: Union[DetectionResult, Sequence[float], np.ndarray],
    config: Config = default_config,
) -> SegmentCollection:
    """
    Classify every consecutive beat pair and group the intervals.

    Parameters
    ----------
    beats : DetectionResult or sequence of float
        R-peak times in seconds, strictly increasing.
    config : Config
        Pipeline configuration with the bradycardia/tachycardia limits.

    Returns
    -------
    SegmentCollection
        Grouped intervals; empty for fewer than two beats.
    """
    if isinstance(beats, DetectionResult):
        beats = beats.peak_times
    beat_times = np.asarray(beats, dtype=float)

    segments = SegmentCollection()
    for start, end in zip(beat_times[:-1], beat_times[1:]):
        interval = RRInterval(start=float(start), end=float(end))
        segments.add(interval, interval.classify(config))

    return segments
