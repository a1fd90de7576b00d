"""
Rhythm report module.

Provides:
- Interactive HTML rhythm reports with Plotly
"""

from pathlib import Path
from typing import Union

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .config import Config, default_config
from .io_utils import ECGSignal
from .rhythm import RhythmLabel
from .rpeak import iter_windows
from .analysis import RhythmAnalysis

LABEL_COLORS = {
    RhythmLabel.BRADYCARDIA: "rgb(0, 100, 200)",
    RhythmLabel.NORMAL: "rgb(40, 160, 60)",
    RhythmLabel.TACHYCARDIA: "rgb(220, 40, 40)",
}


def create_rhythm_report(
    signal: ECGSignal,
    analysis: RhythmAnalysis,
    config: Config = default_config,
) -> str:
    """
    Create interactive HTML rhythm report using Plotly.

    The report contains:
    - Top row: ECG waveform with detected R-peaks and threshold windows
    - Bottom row: Heart rate per RR interval, colored by rhythm category

    Parameters
    ----------
    signal : ECGSignal
        Recording that was analyzed.
    analysis : RhythmAnalysis
        Result of `analyze_signal` on the same recording.
    config : Config
        Pipeline configuration.

    Returns
    -------
    str
        HTML string of the report.
    """
    fig = make_subplots(
        rows=2, cols=1,
        shared_xaxes=True,
        subplot_titles=(
            "ECG with Detected R-Peaks",
            "Heart Rate per RR Interval",
        ),
        vertical_spacing=0.1,
    )

    color_signal = "rgb(0, 100, 200)"
    color_peaks = "rgb(255, 0, 0)"

    # Decimate very long recordings for the waveform trace only
    step = max(1, int(np.ceil(signal.n_samples / config.REPORT_MAX_POINTS)))

    # Row 1: waveform + peaks
    fig.add_trace(
        go.Scatter(
            x=signal.time[::step], y=signal.voltage[::step],
            mode='lines', name='ECG',
            line=dict(color=color_signal, width=1),
        ),
        row=1, col=1
    )

    peak_indices = analysis.detection.peak_indices
    if len(peak_indices) > 0:
        fig.add_trace(
            go.Scatter(
                x=signal.time[peak_indices], y=signal.voltage[peak_indices],
                mode='markers', name='R-peaks',
                marker=dict(color=color_peaks, size=7, symbol='x'),
            ),
            row=1, col=1
        )

    if not signal.is_empty:
        for window_start, _ in iter_windows(float(signal.time[0]), float(signal.time[-1]), config):
            fig.add_vline(x=window_start, line_dash="dot", line_color="lightgray", row=1, col=1)

    # Row 2: heart rate per interval
    for label in RhythmLabel:
        intervals = analysis.segments.intervals(label)
        if not intervals:
            continue
        fig.add_trace(
            go.Scatter(
                x=[interval.start for interval in intervals],
                y=[interval.heart_rate for interval in intervals],
                mode='markers', name=label.value,
                marker=dict(color=LABEL_COLORS[label], size=8),
                customdata=[[interval.end, interval.duration] for interval in intervals],
                hovertemplate=(
                    "start=%{x:.3f}s<br>end=%{customdata[0]:.3f}s<br>"
                    "RR=%{customdata[1]:.3f}s<br>HR=%{y:.1f} bpm"
                ),
            ),
            row=2, col=1
        )

    fig.add_hline(y=config.BRADYCARDIA_HR, line_dash="dash", line_color="blue",
                  annotation_text=f"{config.BRADYCARDIA_HR:g} bpm", row=2, col=1)
    fig.add_hline(y=config.TACHYCARDIA_HR, line_dash="dash", line_color="red",
                  annotation_text=f"{config.TACHYCARDIA_HR:g} bpm", row=2, col=1)

    counts = analysis.segments.counts()
    summary_lines = [
        f"<b>Subject:</b> {analysis.signal_name}",
        f"<b>Duration:</b> {analysis.duration_sec:.1f}s | <b>Samples:</b> {analysis.n_samples:,}",
        f"<b>R-peaks detected:</b> {analysis.n_beats} | "
        + " | ".join(f"<b>{label.value}:</b> {counts[label]}" for label in RhythmLabel),
    ]

    fig.update_layout(
        title=dict(
            text="<br>".join(summary_lines),
            x=0.5,
            xanchor='center',
            font=dict(size=12),
        ),
        height=800,
        showlegend=True,
        template="plotly_white",
    )

    fig.update_xaxes(title_text="Time (s)", row=2, col=1)
    fig.update_yaxes(title_text="Voltage", row=1, col=1)
    fig.update_yaxes(title_text="Heart Rate (bpm)", row=2, col=1)

    return fig.to_html(
        full_html=True,
        include_plotlyjs=True,
        config={
            'displayModeBar': True,
            'scrollZoom': True,
        }
    )


def save_rhythm_report(html_content: str, output_path: Union[str, Path]) -> Path:
    """Write a report produced by `create_rhythm_report`."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(html_content)
    return output_path
