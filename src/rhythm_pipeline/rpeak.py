"""R-peak detection.
Uses a sliding-window adaptive amplitude threshold with a 3-point local
maximum test.
"""

from typing import Iterator, List, Tuple
from dataclasses import dataclass, field

import numpy as np

from .config import Config, default_config
from .io_utils import ECGSignal


@dataclass
class DetectionResult:
    """Result of R-peak detection."""
    peak_indices: np.ndarray    # Sample indices of detected R-peaks
    peak_times: np.ndarray      # Times in seconds, strictly increasing
    n_windows: int = 0          # Threshold windows scanned
    quality_notes: List[str] = field(default_factory=list)

    @property
    def n_peaks(self) -> int:
        """Number of detected peaks."""
        return len(self.peak_times)

    def get_rr_intervals(self) -> np.ndarray:
        """Get RR intervals in seconds."""
        if len(self.peak_times) < 2:
            return np.array([])
        return np.diff(self.peak_times)


def find_threshold(
    signal: ECGSignal,
    start_time: float,
    end_time: float,
    config: Config = default_config,
) -> float:
    """
    Adaptive peak threshold for the closed window [start_time, end_time].

    The window maximum starts from 0.0, so an empty window (or one holding
    only negative voltages) gives a threshold of 0.0.

    Parameters
    ----------
    signal : ECGSignal
        Recording to scan.
    start_time, end_time : float
        Window bounds in seconds, both inclusive.
    config : Config
        Pipeline configuration with THRESHOLD_RATIO.

    Returns
    -------
    float
        Voltage threshold.
    """
    in_window = signal.voltage[signal.window_mask(start_time, end_time)]
    max_voltage = max(0.0, float(in_window.max())) if in_window.size else 0.0
    return max_voltage * config.THRESHOLD_RATIO


def iter_windows(
    first_time: float,
    last_time: float,
    config: Config = default_config,
) -> Iterator[Tuple[float, float]]:
    """Yield (start, end) threshold windows covering [first_time, last_time)."""
    current = first_time
    while current < last_time:
        yield current, min(current + config.INTERVAL_SIZE, last_time)
        current += config.STEP_SIZE


def detect_rpeaks(
    signal: ECGSignal,
    config: Config = default_config,
) -> DetectionResult:
    """Detect R-peaks in an ECG recording.

    Each window gets its own threshold from `find_threshold`. A sample is a
    candidate when it is a strict local maximum above that threshold.
    Candidates within config.DEDUP_WINDOW of the previously accepted beat
    are dropped as re-triggers.

    Parameters
    ----------
    signal : ECGSignal
        Recording in time order.
    config : Config
        Pipeline configuration.

    Returns
    -------
    DetectionResult
        Detected beats; empty for an empty or too-short signal.
    """
    config.validate()

    if signal.is_empty:
        return DetectionResult(
            peak_indices=np.array([], dtype=int),
            peak_times=np.array([], dtype=float),
            quality_notes=["⚠ Empty signal"],
        )

    time = signal.time
    voltage = signal.voltage
    dedup_window = config.DEDUP_WINDOW

    # Strict 3-point local maxima; first and last sample have no neighbours
    is_local_max = np.zeros(len(voltage), dtype=bool)
    if len(voltage) >= 3:
        is_local_max[1:-1] = (voltage[1:-1] > voltage[:-2]) & (voltage[1:-1] > voltage[2:])

    kept: List[int] = []
    n_windows = 0
    for window_start, window_end in iter_windows(float(time[0]), float(time[-1]), config):
        n_windows += 1
        threshold = find_threshold(signal, window_start, window_end, config)

        candidates = np.flatnonzero(
            is_local_max
            & signal.window_mask(window_start, window_end)
            & (voltage > threshold)
        )
        for idx in candidates:
            # Signed difference: anything before the last beat is rejected too
            if kept and time[idx] - time[kept[-1]] < dedup_window:
                continue
            kept.append(int(idx))

    peak_indices = np.asarray(kept, dtype=int)
    peak_times = time[peak_indices] if len(kept) > 0 else np.array([], dtype=float)

    return DetectionResult(
        peak_indices=peak_indices,
        peak_times=np.array(peak_times, dtype=float),
        n_windows=n_windows,
        quality_notes=_assess_detection_quality(peak_times, config),
    )


def _assess_detection_quality(
    peak_times: np.ndarray,
    config: Config,
) -> List[str]:
    """
    Describe detection quality. Notes only; the beats are not changed.

    Parameters
    ----------
    peak_times : np.ndarray
        Detected R-peak times in seconds.
    config : Config
        Pipeline configuration.

    Returns
    -------
    List[str]
        Quality notes.
    """
    if len(peak_times) == 0:
        return ["✗ No R-peaks detected"]

    notes = []
    if len(peak_times) >= 2:
        rr_intervals = np.diff(peak_times)
        too_short = int(np.sum(rr_intervals < config.MIN_RR_INTERVAL))
        if too_short > 0:
            notes.append(
                f"⚠ {too_short} RR intervals < {config.MIN_RR_INTERVAL}s "
                "(faster than physiological limit)"
            )
    else:
        notes.append("⚠ Single R-peak detected; no RR intervals")

    if not notes:
        notes.append("✓ Detection quality appears good")

    return notes
