"""rhythm_pipeline configuration.

Centralizes configurable parameters for R-peak detection, rhythm
classification, and result file handling.
"""

from pathlib import Path
from dataclasses import dataclass


@dataclass
class Config:
    """Pipeline configuration parameters."""

    # ==========================================================================
    # R-Peak Detection Parameters
    # ==========================================================================
    # Sliding window for the adaptive threshold (seconds).
    # Window width and step are separate knobs; equal values give
    # contiguous, non-overlapping windows.
    INTERVAL_SIZE: float = 5.0  # seconds
    STEP_SIZE: float = 5.0      # seconds

    # Threshold = THRESHOLD_RATIO * max voltage inside the window
    THRESHOLD_RATIO: float = 0.7

    # Physiological minimum RR interval (~200 bpm max)
    MIN_RR_INTERVAL: float = 0.3  # seconds

    # Candidates closer than MIN_RR_INTERVAL * DEDUP_FACTOR to the previous
    # beat are treated as re-triggers of the same beat
    DEDUP_FACTOR: float = 0.1

    @property
    def DEDUP_WINDOW(self) -> float:
        """Return the de-duplication gate in seconds."""
        return self.MIN_RR_INTERVAL * self.DEDUP_FACTOR

    # ==========================================================================
    # Rhythm Classification Parameters
    # ==========================================================================
    BRADYCARDIA_HR: float = 60.0   # bpm - below this is Bradycardia
    TACHYCARDIA_HR: float = 100.0  # bpm - above this is Tachycardia

    # ==========================================================================
    # Directory Structure
    # ==========================================================================
    # Base paths (will be resolved relative to project root)
    DATA_DIR: str = "Data"
    RESULTS_DIR: str = "Results"

    # ==========================================================================
    # Output File Naming
    # ==========================================================================
    INPUT_PATTERN: str = "*.txt"
    OUTPUT_PRECISION: int = 6             # decimals in "<start> <end>" lines
    COMBINED_PREFIX: str = "Person"       # <Label>-Person-1-3.txt
    COMBINED_SEPARATOR: str = "**************"
    REPORT_PREFIX: str = "rhythm_"
    SUMMARY_FILE: str = "rhythm_summary.csv"

    # ==========================================================================
    # Visualization Parameters
    # ==========================================================================
    REPORT_MAX_POINTS: int = 200_000  # decimate longer signals in HTML reports

    def validate(self) -> None:
        """Raise ValueError if the parameters cannot drive a detection run."""
        if self.INTERVAL_SIZE <= 0:
            raise ValueError(f"INTERVAL_SIZE must be positive, got {self.INTERVAL_SIZE}")
        if self.STEP_SIZE <= 0:
            raise ValueError(f"STEP_SIZE must be positive, got {self.STEP_SIZE}")
        if not 0.0 < self.THRESHOLD_RATIO <= 1.0:
            raise ValueError(f"THRESHOLD_RATIO must be in (0, 1], got {self.THRESHOLD_RATIO}")
        # A zero gate would accept a window-boundary peak twice
        if self.MIN_RR_INTERVAL <= 0 or self.DEDUP_FACTOR <= 0:
            raise ValueError(
                f"MIN_RR_INTERVAL ({self.MIN_RR_INTERVAL}) and DEDUP_FACTOR "
                f"({self.DEDUP_FACTOR}) must be positive"
            )
        if self.BRADYCARDIA_HR >= self.TACHYCARDIA_HR:
            raise ValueError(
                f"BRADYCARDIA_HR ({self.BRADYCARDIA_HR}) must be below "
                f"TACHYCARDIA_HR ({self.TACHYCARDIA_HR})"
            )

    def get_project_root(self) -> Path:
        """Get project root directory."""
        return Path(__file__).parent.parent.parent

    def get_data_dir(self) -> Path:
        """Get data directory path."""
        return self.get_project_root() / self.DATA_DIR

    def get_results_dir(self) -> Path:
        """Get results directory path."""
        return self.get_project_root() / self.RESULTS_DIR

    def get_summary_path(self, output_dir: Path) -> Path:
        """Get path for the per-run summary CSV."""
        return output_dir / self.SUMMARY_FILE

    def get_report_path(self, output_dir: Path, signal_name: str) -> Path:
        """Get path for a subject's HTML rhythm report."""
        return output_dir / f"{self.REPORT_PREFIX}{signal_name}.html"


# Default configuration instance
default_config = Config()
