import numpy as np
import pytest

from rhythm_pipeline.io_utils import (
    ECGSignal,
    combine_results,
    generate_combined_output_filename,
    generate_output_filename,
    list_signal_files,
    load_signal_txt,
    write_intervals,
)
from rhythm_pipeline.rhythm import RhythmLabel, RRInterval


def test_load_skips_malformed_lines(tmp_path, capsys):
    path = tmp_path / "Person2.txt"
    path.write_text(
        "0.000 0.10\n"
        "0.004 0.20 extra\n"
        "garbage line\n"
        "\n"
        "0.008\n"
        "0.012 abc\n"
        "0.016 -0.30\n"
    )
    sig = load_signal_txt(path)

    np.testing.assert_allclose(sig.time, [0.0, 0.004, 0.016])
    np.testing.assert_allclose(sig.voltage, [0.1, 0.2, -0.3])
    assert sig.name == "Person2"

    out = capsys.readouterr().out
    assert out.count("Incorrectly formatted line") == 3
    assert "line 3" in out and "line 5" in out and "line 6" in out


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_signal_txt(tmp_path / "missing.txt")


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("")
    sig = load_signal_txt(path)
    assert sig.is_empty
    assert sig.duration_seconds == 0.0


def test_load_rejects_unordered_time(tmp_path):
    path = tmp_path / "backwards.txt"
    path.write_text("1.0 0.1\n0.5 0.2\n")
    with pytest.raises(ValueError):
        load_signal_txt(path)


def test_signal_invariants():
    with pytest.raises(ValueError):
        ECGSignal(time=[0.0, 1.0], voltage=[1.0])
    sig = ECGSignal(time=[0.0, 0.5, 0.5, 1.0], voltage=[0, 1, 2, 3])
    assert sig.n_samples == 4
    assert sig.duration_seconds == pytest.approx(1.0)
    with pytest.raises(ValueError):
        sig.voltage[0] = 10.0


def test_write_intervals_six_decimals(tmp_path):
    path = tmp_path / "out" / "Person1-Normal.txt"
    write_intervals(path, [RRInterval(1.0, 2.0), RRInterval(2.0, 2.9999999)])
    assert path.read_text() == "1.000000 2.000000\n2.000000 3.000000\n"


def test_write_no_intervals_creates_empty_file(tmp_path):
    path = write_intervals(tmp_path / "Person1-Bradycardia.txt", [])
    assert path.exists()
    assert path.read_text() == ""


def test_generate_output_filename(tmp_path):
    path = generate_output_filename(tmp_path / "Person1.txt", RhythmLabel.TACHYCARDIA)
    assert path == tmp_path / "Person1-Tachycardia.txt"
    path = generate_output_filename("Person1.txt", RhythmLabel.NORMAL, tmp_path / "res")
    assert path == tmp_path / "res" / "Person1-Normal.txt"


def test_generate_combined_output_filename():
    inputs = ["data/Person1.txt", "Person3.txt", "subject.txt", "P12b.txt"]
    name = generate_combined_output_filename(inputs, RhythmLabel.BRADYCARDIA)
    assert name == "Bradycardia-Person-1-3-12b.txt"


def test_combine_results_with_separator(tmp_path, capsys):
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("1.000000 2.000000\n")
    b.write_text("3.000000 4.000000\n4.000000 5.000000")
    out = combine_results(tmp_path / "combined.txt", [tmp_path / "missing.txt", a, tmp_path / "gone.txt", b])

    assert out.read_text() == (
        "1.000000 2.000000\n"
        "**************\n"
        "3.000000 4.000000\n"
        "4.000000 5.000000\n"
    )
    assert capsys.readouterr().out.count("File can not be opened") == 2


def test_combine_keeps_empty_blocks(tmp_path):
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("")
    b.write_text("1.000000 2.000000\n")
    out = combine_results(tmp_path / "combined.txt", [a, b], separator="---")
    assert out.read_text() == "---\n1.000000 2.000000\n"


def test_list_signal_files_skips_results(tmp_path):
    for name in ["Person1.txt", "Person3.txt", "Person1-Normal.txt",
                 "Normal-Person-1-3.txt", "notes.csv"]:
        (tmp_path / name).write_text("")
    files = list_signal_files(tmp_path)
    assert [f.name for f in files] == ["Person1.txt", "Person3.txt"]


def test_list_signal_files_missing_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_signal_files(tmp_path / "nope")


@pytest.mark.parametrize("line", ["inf 0.5", "1e400 0.5", "-inf 0.5", "nan 0.5", "0.5 inf", "0.5 1e999"])
def test_load_skips_non_finite_values(tmp_path, capsys, line):
    path = tmp_path / "Person4.txt"
    path.write_text(f"0.0 0.0\n0.5 1.0\n1.0 0.0\n{line}\n")
    sig = load_signal_txt(path)

    np.testing.assert_allclose(sig.time, [0.0, 0.5, 1.0])
    assert "line 4" in capsys.readouterr().out


def test_load_reads_numeric_prefix_of_voltage(tmp_path, capsys):
    path = tmp_path / "Person5.txt"
    path.write_text("0.1 2.0abc\n0.2abc 3.0\n0.3 -1.5e-1mV\n")
    sig = load_signal_txt(path)

    np.testing.assert_allclose(sig.time, [0.1, 0.3])
    np.testing.assert_allclose(sig.voltage, [2.0, -0.15])
    assert capsys.readouterr().out.count("Incorrectly formatted line") == 1


@pytest.mark.parametrize("bad", [np.inf, -np.inf, np.nan])
def test_signal_rejects_non_finite_time(bad):
    with pytest.raises(ValueError):
        ECGSignal(time=[0.0, 0.5, bad], voltage=[0.0, 1.0, 0.0])
