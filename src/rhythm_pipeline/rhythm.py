"""
Rhythm classification of RR intervals.

Provides:
- RhythmLabel: closed set of rhythm categories
- Heart-rate computation and per-interval classification
- RRInterval: a pair of consecutive R-peak times
"""

import math
from enum import Enum
from dataclasses import dataclass

from .config import Config, default_config


class RhythmLabel(Enum):
    """Rhythm category of a single RR interval."""
    BRADYCARDIA = "Bradycardia"
    NORMAL = "Normal"
    TACHYCARDIA = "Tachycardia"

    def __str__(self) -> str:
        return self.value


# Order in which per-subject result files are written
WRITE_ORDER = (RhythmLabel.TACHYCARDIA, RhythmLabel.BRADYCARDIA, RhythmLabel.NORMAL)

# Order in which combined files are produced
COMBINE_ORDER = (RhythmLabel.NORMAL, RhythmLabel.TACHYCARDIA, RhythmLabel.BRADYCARDIA)


def compute_heart_rate(rr_interval: float) -> float:
    """
    Convert an RR interval to instantaneous heart rate.

    Parameters
    ----------
    rr_interval : float
        RR interval duration in seconds.

    Returns
    -------
    float
        Heart rate in beats per minute.

    Raises
    ------
    ValueError
        If the duration is not a positive finite number.
    """
    rr_interval = float(rr_interval)
    if not math.isfinite(rr_interval) or rr_interval <= 0:
        raise ValueError(f"RR interval must be a positive finite duration, got {rr_interval}")
    return 60.0 / rr_interval


def classify_rr_interval(
    rr_interval: float,
    config: Config = default_config,
) -> RhythmLabel:
    """
    Classify an RR interval by its heart rate.

    Rates below BRADYCARDIA_HR are Bradycardia, rates above TACHYCARDIA_HR
    are Tachycardia; both limits themselves count as Normal.

    Parameters
    ----------
    rr_interval : float
        RR interval duration in seconds.
    config : Config
        Pipeline configuration with BRADYCARDIA_HR, TACHYCARDIA_HR.

    Returns
    -------
    RhythmLabel
        Rhythm category of the interval.
    """
    heart_rate = compute_heart_rate(rr_interval)
    if heart_rate < config.BRADYCARDIA_HR:
        return RhythmLabel.BRADYCARDIA
    if heart_rate > config.TACHYCARDIA_HR:
        return RhythmLabel.TACHYCARDIA
    return RhythmLabel.NORMAL


@dataclass(frozen=True)
class RRInterval:
    """Interval between two consecutive R-peaks."""
    start: float  # R-peak time in seconds
    end: float    # Next R-peak time in seconds

    def __post_init__(self):
        if not self.end > self.start:
            raise ValueError(
                f"RR interval end must be after start (start={self.start}, end={self.end})"
            )

    @property
    def duration(self) -> float:
        """Interval duration in seconds."""
        return self.end - self.start

    @property
    def heart_rate(self) -> float:
        """Instantaneous heart rate in bpm."""
        return compute_heart_rate(self.duration)

    @property
    def label(self) -> RhythmLabel:
        """Rhythm category using the default thresholds."""
        return classify_rr_interval(self.duration)

    def classify(self, config: Config = default_config) -> RhythmLabel:
        """Rhythm category using the thresholds in ``config``."""
        return classify_rr_interval(self.duration, config)

    def format(self, precision: int = 6) -> str:
        """Format as a result file line without the newline."""
        return f"{self.start:.{precision}f} {self.end:.{precision}f}"
