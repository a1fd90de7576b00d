from pathlib import Path

import numpy as np
import pytest

from rhythm_pipeline.io_utils import ECGSignal

FS = 100  # Hz


def spike_signal(duration, spikes, fs=FS, name="synthetic"):
    """Flat zero baseline with single-sample spikes.

    ``spikes`` maps spike time (s) to amplitude.
    """
    n = int(round(duration * fs)) + 1
    time = np.arange(n) / fs
    voltage = np.zeros(n)
    for t, amplitude in spikes.items():
        voltage[int(round(t * fs))] = amplitude
    return ECGSignal(time=time, voltage=voltage, name=name)


def write_recording(path: Path, signal: ECGSignal) -> Path:
    with open(path, "w", encoding="utf-8") as f:
        for t, v in zip(signal.time, signal.voltage):
            f.write(f"{t:.2f} {v:.3f}\n")
    return path


@pytest.fixture
def periodic_signal():
    # 60 bpm over one 5 s window
    return spike_signal(5.0, {1.0: 1.0, 2.0: 1.0, 3.0: 1.0, 4.0: 1.0}, name="Person1")


@pytest.fixture
def recording_files(tmp_path):
    """Two subjects on disk: one at 60 bpm, one at 120 bpm."""
    normal = spike_signal(5.0, {1.0: 1.0, 2.0: 1.0, 3.0: 1.0, 4.0: 1.0})
    fast = spike_signal(5.0, {1.0: 1.0, 1.5: 1.0, 2.0: 1.0, 2.5: 1.0})
    return [
        write_recording(tmp_path / "Person1.txt", normal),
        write_recording(tmp_path / "Person3.txt", fast),
    ]
