"""Tests for the caption-synth command-line interface.

WHY: The CLI is how render scripts drive the engine, so its exit codes,
output targets and flag precedence are an interface in their own right.

HOW: Call main() with explicit argv against files in tmp_path. stdout and
stderr are captured with capsys; failures are observed as SystemExit.

RULES:
- Exit 0 on success (main returns normally), 1 on input/filesystem errors
- argparse usage errors exit 2
- The script itself only ever goes to stdout or the named file
"""

import io
import json

import pytest

from caption_synth.cli import _explicit_options, build_parser, main
from conftest import dialogue_rows


@pytest.fixture
def segments_file(tmp_path, sample_json):
    path = tmp_path / "segments.json"
    path.write_text(json.dumps(sample_json), encoding="utf-8")
    return path


def _style_row(script):
    return next(r for r in script.splitlines() if r.startswith("Style: "))


# ---------------------------------------------------------------------------
# Output targets
# ---------------------------------------------------------------------------


class TestOutputTargets:
    """stdout, --output, --job-id and --output-dir."""

    def test_stdout(self, segments_file, capsys):
        main([str(segments_file), "--canvas", "1080x1920"])
        captured = capsys.readouterr()
        assert captured.out.startswith("[Script Info]")
        assert len(dialogue_rows(captured.out)) == 3
        assert "Loaded 3 segment(s)" in captured.err
        assert "Loaded" not in captured.out

    def test_stdin(self, sample_json, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(sample_json)))
        main(["-"])
        assert len(dialogue_rows(capsys.readouterr().out)) == 3

    def test_output_file(self, segments_file, tmp_path, capsys):
        target = tmp_path / "out" / "captions.ass"
        main([str(segments_file), "--output", str(target)])
        assert target.read_text(encoding="utf-8").startswith("[Script Info]")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Saved:" in captured.err

    def test_job_id_and_output_dir(self, segments_file, tmp_path):
        main([str(segments_file), "--job-id", "abc", "--output-dir", str(tmp_path / "jobs")])
        assert (tmp_path / "jobs" / "abc.ass").is_file()

    def test_output_dir_generates_job_id(self, segments_file, tmp_path):
        out_dir = tmp_path / "jobs"
        main([str(segments_file), "--output-dir", str(out_dir)])
        files = list(out_dir.glob("*.ass"))
        assert len(files) == 1
        assert len(files[0].stem) == 32


# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------


class TestFlags:
    """Explicit flags over presets."""

    def test_explicit_flag_beats_preset(self, segments_file, capsys):
        main([str(segments_file), "--preset", "hero-pop", "--font-size", "40", "--no-bold"])
        fields = _style_row(capsys.readouterr().out).split(",")
        assert fields[1] == "Montserrat ExtraBold"
        assert fields[2] == "40"
        assert fields[7] == "0"

    def test_position_and_animation(self, segments_file, capsys):
        main([
            str(segments_file), "--position", "top-safe",
            "--animation", "fade", "--canvas", "1920x1080",
        ])
        out = capsys.readouterr().out
        assert "PlayResX: 1920" in out
        assert "{\\an8\\pos(960,162)\\fad(300,300)}" in dialogue_rows(out)[0]

    def test_offsets(self, segments_file, capsys):
        main([str(segments_file), "--offset-x", "-100", "--offset-y", "300", "--canvas", "1080x1920"])
        assert "\\pos(440,660)" in dialogue_rows(capsys.readouterr().out)[0]

    def test_unset_flags_are_omitted(self):
        args = build_parser().parse_args(["x.json", "--color", "#FF0000"])
        assert _explicit_options(args) == {"primary_color": "#FF0000"}

    def test_list_presets(self, capsys):
        main(["--list-presets"])
        out = capsys.readouterr().out
        assert "hero-pop" in out
        assert "word-by-word" in out
        assert "bottom-safe" in out


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    """Failures exit non-zero with a message on stderr."""

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main([str(path)])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_inverted_segment(self, tmp_path):
        path = tmp_path / "inverted.json"
        path.write_text(json.dumps([{"start": 2, "end": 1, "text": "x"}]), encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main([str(path)])
        assert exc_info.value.code == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "nope.json")])
        assert exc_info.value.code == 1

    def test_unusable_job_id(self, segments_file, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(segments_file), "--job-id", "..", "--output-dir", str(tmp_path)])
        assert exc_info.value.code == 1

    def test_missing_segments_argument(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_bad_canvas(self, segments_file):
        with pytest.raises(SystemExit) as exc_info:
            main([str(segments_file), "--canvas", "wide"])
        assert exc_info.value.code == 2

    @pytest.mark.parametrize("flag", ["--font-size", "--max-chars"])
    @pytest.mark.parametrize("value", ["0", "-5", "big"])
    def test_non_positive_sizes_rejected(self, segments_file, flag, value):
        with pytest.raises(SystemExit) as exc_info:
            main([str(segments_file), "--animation", "rise", flag, value])
        assert exc_info.value.code == 2
