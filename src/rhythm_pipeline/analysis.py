"""
Rhythm analysis orchestration.

Provides:
- Single-signal analysis (detection -> classification -> aggregation)
- Per-subject result file generation
- Cross-subject combination of result files
- Summary table across subjects
"""

import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .config import Config, default_config
from .io_utils import (
    ECGSignal,
    load_signal_txt,
    write_intervals,
    generate_output_filename,
    generate_combined_output_filename,
    combine_results,
)
from .rhythm import RhythmLabel, WRITE_ORDER, COMBINE_ORDER
from .rpeak import DetectionResult, detect_rpeaks
from .segments import SegmentCollection, aggregate_segments

PathLike = Union[str, Path]


@dataclass
class RhythmAnalysis:
    """Complete rhythm analysis of one recording."""
    signal_name: str
    n_samples: int
    duration_sec: float
    detection: DetectionResult
    segments: SegmentCollection

    @property
    def n_beats(self) -> int:
        return self.detection.n_peaks

    def to_summary_dict(self) -> Dict[str, Any]:
        """Convert to flat dictionary for CSV export."""
        result = {
            "subject": self.signal_name,
            "n_samples": self.n_samples,
            "duration_sec": self.duration_sec,
            "n_beats": self.n_beats,
            "n_intervals": self.segments.n_intervals,
        }
        all_rates = []
        for label in RhythmLabel:
            rates = [interval.heart_rate for interval in self.segments.intervals(label)]
            all_rates.extend(rates)
            key = label.value.lower()
            result[f"n_{key}"] = len(rates)
            result[f"mean_hr_{key}"] = float(np.mean(rates)) if rates else np.nan
        result["mean_hr"] = float(np.mean(all_rates)) if all_rates else np.nan
        result["quality_notes"] = "; ".join(self.detection.quality_notes)
        return result


def analyze_signal(
    signal: ECGSignal,
    config: Config = default_config,
) -> RhythmAnalysis:
    """
    Run R-peak detection and rhythm classification on one recording.

    Parameters
    ----------
    signal : ECGSignal
        Loaded recording.
    config : Config
        Pipeline configuration.

    Returns
    -------
    RhythmAnalysis
        Beats and grouped RR intervals. No state is kept between calls.
    """
    detection = detect_rpeaks(signal, config)
    segments = aggregate_segments(detection, config)
    return RhythmAnalysis(
        signal_name=signal.name,
        n_samples=signal.n_samples,
        duration_sec=signal.duration_seconds,
        detection=detection,
        segments=segments,
    )


def write_analysis_results(
    analysis: RhythmAnalysis,
    input_path: PathLike,
    output_dir: Optional[PathLike] = None,
    config: Config = default_config,
) -> Dict[RhythmLabel, Path]:
    """Write the three per-category result files for one subject."""
    written = {}
    for label in WRITE_ORDER:
        path = generate_output_filename(input_path, label, output_dir)
        written[label] = write_intervals(
            path, analysis.segments.intervals(label), config.OUTPUT_PRECISION
        )
    return written


def process_signal_file(
    input_path: PathLike,
    output_dir: Optional[PathLike] = None,
    config: Config = default_config,
    verbose: bool = True,
    report: bool = False,
) -> Tuple[RhythmAnalysis, Dict[RhythmLabel, Path]]:
    """
    Load, analyze and write results for a single recording.

    Parameters
    ----------
    input_path : str or Path
        Recording file.
    output_dir : str or Path, optional
        Where to write result files. Defaults to the input's directory.
    config : Config
        Pipeline configuration.
    verbose : bool
        Print progress messages.
    report : bool
        Also write an interactive HTML report next to the result files.

    Returns
    -------
    Tuple[RhythmAnalysis, Dict[RhythmLabel, Path]]
        The analysis and the written file per category.

    Raises
    ------
    FileNotFoundError
        If the recording does not exist.
    """
    input_path = Path(input_path)

    if verbose:
        print(f"\n{'='*60}")
        print(f"Processing: {input_path.stem}")
        print(f"{'='*60}")
        print("  [1/3] Loading data...")

    signal = load_signal_txt(input_path)

    if verbose:
        print(f"        ✓ Loaded {signal.n_samples:,} samples ({signal.duration_seconds:.1f}s)")
        print("  [2/3] Detecting R-peaks and classifying rhythm...")

    analysis = analyze_signal(signal, config)

    if verbose:
        print(f"        ✓ R-peaks: {analysis.n_beats} "
              f"({analysis.detection.n_windows} windows of {config.INTERVAL_SIZE}s)")
        for label, n in analysis.segments.counts().items():
            print(f"        ✓ {label.value}: {n} intervals")
        for note in analysis.detection.quality_notes:
            print(f"        {note}")
        print("  [3/3] Writing results...")

    written = write_analysis_results(analysis, input_path, output_dir, config)

    if verbose:
        for path in written.values():
            print(f"        ✓ Saved: {path.name}")

    if report:
        # report.py depends on this module
        from .report import create_rhythm_report, save_rhythm_report

        report_dir = Path(output_dir) if output_dir is not None else input_path.parent
        html = create_rhythm_report(signal, analysis, config)
        report_path = save_rhythm_report(html, config.get_report_path(report_dir, signal.name))
        if verbose:
            print(f"        ✓ Saved: {report_path.name}")

    return analysis, written


def process_files(
    input_paths: Sequence[PathLike],
    output_dir: Optional[PathLike] = None,
    config: Config = default_config,
    verbose: bool = True,
    skip_errors: bool = False,
    report: bool = False,
) -> List[Tuple[Path, Optional[RhythmAnalysis]]]:
    """
    Process recordings one after another.

    Parameters
    ----------
    input_paths : Sequence[str or Path]
        Recordings to process, in order.
    output_dir : str or Path, optional
        Where to write result files.
    config : Config
        Pipeline configuration.
    verbose : bool
        Print progress messages.
    skip_errors : bool
        If True, report a failing subject and continue; its analysis is None.
        If False, the first failure propagates.
    report : bool
        Also write an interactive HTML report per recording.

    Returns
    -------
    List[Tuple[Path, Optional[RhythmAnalysis]]]
        One entry per input, in input order.
    """
    results = []
    for path in input_paths:
        path = Path(path)
        try:
            analysis, _ = process_signal_file(path, output_dir, config, verbose, report)
        except (OSError, ValueError) as e:
            if not skip_errors:
                raise
            print(f"  ✗ ERROR processing {path.stem}: {e}")
            traceback.print_exc()
            analysis = None
        results.append((path, analysis))
    return results


def combine_subject_results(
    input_paths: Sequence[PathLike],
    output_dir: Optional[PathLike] = None,
    config: Config = default_config,
) -> Dict[RhythmLabel, Path]:
    """
    Combine per-subject result files into one file per category.

    Parameters
    ----------
    input_paths : Sequence[str or Path]
        Input recordings; their result files are located with
        `generate_output_filename`.
    output_dir : str or Path, optional
        Directory holding the per-subject results and receiving the
        combined files. Defaults to the first input's directory.
    config : Config
        Pipeline configuration.

    Returns
    -------
    Dict[RhythmLabel, Path]
        Combined file per category.
    """
    input_paths = [Path(p) for p in input_paths]
    if output_dir is not None:
        target_dir = Path(output_dir)
    elif input_paths:
        target_dir = input_paths[0].parent
    else:
        target_dir = Path(".")

    combined = {}
    for label in COMBINE_ORDER:
        label_files = [generate_output_filename(p, label, output_dir) for p in input_paths]
        filename = generate_combined_output_filename(
            input_paths, label, config.COMBINED_PREFIX
        )
        combined[label] = combine_results(
            target_dir / filename, label_files, config.COMBINED_SEPARATOR
        )
    return combined


def summarize_analyses(analyses: Sequence[RhythmAnalysis]) -> pd.DataFrame:
    """One summary row per analyzed subject."""
    rows = [analysis.to_summary_dict() for analysis in analyses]
    return pd.DataFrame(rows)
