# ECG Rhythm Pipeline
# R-peak detection and RR-interval rhythm classification

from .config import Config, default_config
from .io_utils import (
    ECGSignal,
    load_signal_txt,
    write_intervals,
    combine_results,
    generate_output_filename,
    generate_combined_output_filename,
    list_signal_files,
)
from .rhythm import RhythmLabel, RRInterval, classify_rr_interval, compute_heart_rate
from .rpeak import DetectionResult, find_threshold, detect_rpeaks
from .segments import SegmentCollection, aggregate_segments
from .analysis import (
    RhythmAnalysis,
    analyze_signal,
    process_signal_file,
    process_files,
    combine_subject_results,
    summarize_analyses,
)

__all__ = [
    "Config",
    "default_config",
    "ECGSignal",
    "load_signal_txt",
    "write_intervals",
    "combine_results",
    "generate_output_filename",
    "generate_combined_output_filename",
    "list_signal_files",
    "RhythmLabel",
    "RRInterval",
    "classify_rr_interval",
    "compute_heart_rate",
    "DetectionResult",
    "find_threshold",
    "detect_rpeaks",
    "SegmentCollection",
    "aggregate_segments",
    "RhythmAnalysis",
    "analyze_signal",
    "process_signal_file",
    "process_files",
    "combine_subject_results",
    "summarize_analyses",
]
