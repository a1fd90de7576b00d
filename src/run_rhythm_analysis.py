#!/usr/bin/env python3
"""
ECG Rhythm Analysis

This script classifies heart rhythm from single-lead ECG recordings:
1. Load "time voltage" text recordings
2. R-peak detection with a sliding adaptive threshold
3. RR interval classification (Bradycardia / Normal / Tachycardia)
4. Write per-subject result files
5. Combine result files across subjects, one file per category

Usage:
    python src/run_rhythm_analysis.py Person1.txt Person3.txt
    python src/run_rhythm_analysis.py --data-dir Data --output-dir Results --summary --report

Output:
    {output}/{subject}-{Label}.txt          - "<start> <end>" RR intervals per category
    {output}/{Label}-Person-{ids}.txt       - Combined files across subjects
    {output}/rhythm_summary.csv             - Per-subject summary (--summary)
    {output}/rhythm_{subject}.html          - Interactive report (--report)
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

# Ensure this script works when executed from any CWD.
sys.path.insert(0, str(Path(__file__).resolve().parent))

from rhythm_pipeline.config import Config
from rhythm_pipeline.io_utils import list_signal_files
from rhythm_pipeline.analysis import (
    process_files,
    combine_subject_results,
    summarize_analyses,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ECG Rhythm Analysis: R-peak detection and RR interval classification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Analyze two subjects and combine their results
    python src/run_rhythm_analysis.py Person1.txt Person3.txt

    # Analyze every recording in a directory, writing to Results/
    python src/run_rhythm_analysis.py --data-dir Data --output-dir Results

    # Shorter threshold windows, summary CSV and HTML reports
    python src/run_rhythm_analysis.py Person1.txt --interval-size 2.5 --step-size 2.5 --summary --report
        """
    )

    parser.add_argument(
        "inputs",
        nargs="*",
        type=Path,
        help="Recording files (whitespace-delimited 'time voltage' lines)"
    )

    parser.add_argument(
        "--data-dir", "-d",
        type=Path,
        default=None,
        help="Directory to scan for recordings (used when no inputs are given)"
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=None,
        help="Output directory (default: next to each recording)"
    )

    parser.add_argument(
        "--no-combine",
        action="store_true",
        help="Do not combine result files across subjects"
    )

    parser.add_argument(
        "--summary",
        action="store_true",
        help="Write a per-subject summary CSV"
    )

    parser.add_argument(
        "--report",
        action="store_true",
        help="Write an interactive HTML report per subject"
    )

    parser.add_argument("--interval-size", type=float, default=None,
                        help="Threshold window width in seconds")
    parser.add_argument("--step-size", type=float, default=None,
                        help="Threshold window step in seconds")
    parser.add_argument("--min-rr", type=float, default=None,
                        help="Physiological minimum RR interval in seconds")

    parser.add_argument(
        "--skip-errors",
        action="store_true",
        help="Continue with the next subject when one fails"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress messages"
    )

    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Default configuration with command-line overrides applied."""
    overrides = {}
    if args.interval_size is not None:
        overrides["INTERVAL_SIZE"] = args.interval_size
    if args.step_size is not None:
        overrides["STEP_SIZE"] = args.step_size
    if args.min_rr is not None:
        overrides["MIN_RR_INTERVAL"] = args.min_rr
    config = replace(Config(), **overrides)
    config.validate()
    return config


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))

    verbose = not args.quiet

    if args.inputs:
        input_files = list(args.inputs)
    else:
        data_dir = args.data_dir if args.data_dir is not None else config.get_data_dir()
        try:
            input_files = list_signal_files(data_dir, config)
        except FileNotFoundError as e:
            print(f"Error: {e}")
            return 1

    if not input_files:
        print("Error: No recordings to process.")
        return 1

    if verbose:
        print("=" * 60)
        print("ECG Rhythm Analysis")
        print("=" * 60)
        print(f"Config: window={config.INTERVAL_SIZE}s, step={config.STEP_SIZE}s, "
              f"threshold={config.THRESHOLD_RATIO:.0%} of window max")
        print(f"Rhythm limits: <{config.BRADYCARDIA_HR:g} bpm Bradycardia, "
              f">{config.TACHYCARDIA_HR:g} bpm Tachycardia")
        print(f"Recordings to process: {len(input_files)}")

    results = process_files(
        input_files,
        args.output_dir,
        config,
        verbose=verbose,
        skip_errors=args.skip_errors,
        report=args.report,
    )

    succeeded = [path for path, analysis in results if analysis is not None]
    failed = [path for path, analysis in results if analysis is None]

    if not args.no_combine and succeeded:
        combined = combine_subject_results(succeeded, args.output_dir, config)
        if verbose:
            print("\nCombined results:")
            for path in combined.values():
                print(f"  ✓ {path}")

    if args.summary and succeeded:
        summary_dir = args.output_dir if args.output_dir is not None else succeeded[0].parent
        summary_dir.mkdir(parents=True, exist_ok=True)
        summary_path = config.get_summary_path(summary_dir)
        summary = summarize_analyses([analysis for _, analysis in results if analysis is not None])
        summary.to_csv(summary_path, index=False)
        if verbose:
            print(f"\n  ✓ Summary: {summary_path}")

    if verbose:
        print("\n" + "=" * 60)
        print("SUMMARY")
        print("=" * 60)
        print(f"Total recordings: {len(results)}")
        print(f"Successful: {len(succeeded)}")
        print(f"Failed: {len(failed)}")

        if failed:
            print("\nFailed recordings:")
            for path in failed:
                print(f"  - {path.stem}")

        print("\nECG analysis completed.")

    return 0 if not failed else 1


if __name__ == "__main__":
    sys.exit(main())
