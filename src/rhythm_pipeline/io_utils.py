"""
I/O utilities for the rhythm analysis pipeline.

Handles:
- Loading whitespace-delimited "time voltage" recordings
- Writing per-category RR interval result files
- Combining per-subject result files into one file per category
"""

import re
from pathlib import Path
from typing import Iterable, List, Optional, Union
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .config import Config, default_config
from .rhythm import RhythmLabel, RRInterval

PathLike = Union[str, Path]

# Decimal number with optional exponent
NUMBER_PATTERN = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"


@dataclass
class ECGSignal:
    """Container for one subject's single-lead recording."""
    time: np.ndarray     # Sample times in seconds (non-decreasing)
    voltage: np.ndarray  # Sample voltages
    name: str = ""       # Subject / file identifier

    def __post_init__(self):
        time = np.array(self.time, dtype=np.float64)
        voltage = np.array(self.voltage, dtype=np.float64)

        if time.ndim != 1 or voltage.ndim != 1:
            raise ValueError("time and voltage must be 1-D sequences")
        if len(time) != len(voltage):
            raise ValueError(
                f"time and voltage lengths differ ({len(time)} != {len(voltage)})"
            )
        if not np.all(np.isfinite(time)):
            raise ValueError(f"time must be finite in signal '{self.name}'")
        if len(time) > 1 and np.any(np.diff(time) < 0):
            raise ValueError(f"time must be non-decreasing in signal '{self.name}'")

        # Loaded once, read-only afterwards
        time.flags.writeable = False
        voltage.flags.writeable = False
        self.time = time
        self.voltage = voltage

    @property
    def n_samples(self) -> int:
        """Number of samples."""
        return len(self.time)

    @property
    def is_empty(self) -> bool:
        return self.n_samples == 0

    @property
    def duration_seconds(self) -> float:
        """Time span covered by the samples."""
        if self.n_samples < 2:
            return 0.0
        return float(self.time[-1] - self.time[0])

    def window_mask(self, start: float, end: float) -> np.ndarray:
        """Boolean mask of samples with time in the closed window [start, end]."""
        return (self.time >= start) & (self.time <= end)


def load_signal_txt(
    txt_path: PathLike,
    name: Optional[str] = None,
) -> ECGSignal:
    """
    Load an ECG recording from a whitespace-delimited text file.

    Each non-blank line holds a time (seconds) and a voltage. Further
    columns are ignored, as is non-numeric text directly after the voltage.
    Lines without a finite numeric time and voltage are skipped with a
    warning.

    Parameters
    ----------
    txt_path : str or Path
        Path to the recording.
    name : str, optional
        Signal identifier. Defaults to the file stem.

    Returns
    -------
    ECGSignal
        Loaded recording.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the parsed times are not in order.
    """
    txt_path = Path(txt_path)
    if not txt_path.exists():
        raise FileNotFoundError(f"Signal file not found: {txt_path}")

    with open(txt_path, 'r', encoding='utf-8', errors='replace') as f:
        lines = f.read().splitlines()

    records = []
    for line_no, line in enumerate(lines, start=1):
        tokens = line.split()
        if not tokens:
            continue
        voltage_token = tokens[1] if len(tokens) > 1 else None
        records.append((line_no, line, tokens[0], voltage_token))

    df = pd.DataFrame(records, columns=["line_no", "line", "time", "voltage"])
    # Time must be a whole number token; voltage may carry trailing junk
    # ("2.0abc" reads as 2.0). inf/nan spellings never match.
    df["time"] = pd.to_numeric(
        df["time"].str.extract(f"^({NUMBER_PATTERN})$", expand=False), errors="coerce"
    )
    df["voltage"] = pd.to_numeric(
        df["voltage"].str.extract(f"^({NUMBER_PATTERN})", expand=False), errors="coerce"
    )

    # Overflowing tokens such as 1e400 parse to inf
    malformed = ~(np.isfinite(df["time"].to_numpy(dtype=np.float64))
                  & np.isfinite(df["voltage"].to_numpy(dtype=np.float64)))
    malformed = pd.Series(malformed, index=df.index)
    for row in df[malformed].itertuples(index=False):
        print(
            f"  ⚠ Warning: Incorrectly formatted line {row.line_no} "
            f"in {txt_path.name}: {row.line!r}"
        )

    valid = df[~malformed]
    return ECGSignal(
        time=valid["time"].to_numpy(dtype=np.float64),
        voltage=valid["voltage"].to_numpy(dtype=np.float64),
        name=name if name is not None else txt_path.stem,
    )


def write_intervals(
    output_path: PathLike,
    intervals: Iterable[RRInterval],
    precision: int = 6,
) -> Path:
    """
    Write RR intervals as "<start> <end>" lines.

    Parameters
    ----------
    output_path : str or Path
        Destination file; parent directories are created.
    intervals : Iterable[RRInterval]
        Intervals in the order they should appear.
    precision : int
        Number of decimals for both times.

    Returns
    -------
    Path
        The written file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        for interval in intervals:
            f.write(interval.format(precision) + "\n")

    return output_path


def generate_output_filename(
    input_path: PathLike,
    label: RhythmLabel,
    output_dir: Optional[PathLike] = None,
) -> Path:
    """Per-subject result path: ``<input without extension>-<Label>.txt``."""
    input_path = Path(input_path)
    directory = Path(output_dir) if output_dir is not None else input_path.parent
    return directory / f"{input_path.stem}-{label.value}.txt"


def generate_combined_output_filename(
    input_paths: Iterable[PathLike],
    label: RhythmLabel,
    prefix: str = default_config.COMBINED_PREFIX,
) -> str:
    """
    Combined result filename, e.g. ``Normal-Person-1-3.txt``.

    Each input contributes its base name from the first digit onward;
    inputs without digits contribute nothing.
    """
    filename = f"{label.value}-{prefix}"
    for path in input_paths:
        base = Path(path).stem
        match = re.search(r"\d", base)
        if match is not None:
            filename += "-" + base[match.start():]
    return filename + ".txt"


def combine_results(
    output_path: PathLike,
    input_paths: Iterable[PathLike],
    separator: str = default_config.COMBINED_SEPARATOR,
) -> Path:
    """
    Concatenate result files, writing a separator line between blocks.

    Inputs that cannot be opened are reported and skipped; they do not
    start a new block.

    Parameters
    ----------
    output_path : str or Path
        Combined file to write.
    input_paths : Iterable[str or Path]
        Per-subject result files, in output order.
    separator : str
        Line written between consecutive blocks.

    Returns
    -------
    Path
        The written file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as out:
        is_first_block = True
        for path in input_paths:
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    lines = f.read().splitlines()
            except OSError as e:
                print(f"  ✗ Error: File can not be opened: {path} ({e})")
                continue

            if not is_first_block:
                out.write(separator + "\n")
            is_first_block = False

            for line in lines:
                out.write(line + "\n")

    return output_path


def is_result_file(path: PathLike, config: Config = default_config) -> bool:
    """True for files produced by this pipeline (per-subject or combined)."""
    stem = Path(path).stem
    for label in RhythmLabel:
        if stem.endswith(f"-{label.value}"):
            return True
        if stem.startswith(f"{label.value}-{config.COMBINED_PREFIX}"):
            return True
    return False


def list_signal_files(
    directory: PathLike,
    config: Config = default_config,
) -> List[Path]:
    """
    List recording files in a directory.

    Parameters
    ----------
    directory : str or Path
        Directory to scan with config.INPUT_PATTERN.
    config : Config
        Pipeline configuration.

    Returns
    -------
    List[Path]
        Sorted recording paths, excluding earlier result files.
    """
    directory = Path(directory)

    if not directory.exists():
        raise FileNotFoundError(f"Data directory not found: {directory}")

    return sorted(
        path for path in directory.glob(config.INPUT_PATTERN)
        if path.is_file() and not is_result_file(path, config)
    )
