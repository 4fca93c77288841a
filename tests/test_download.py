"""Tests for labreport.download — write_report()."""

from labreport.download import REPORT_FILENAME, REPORT_MEDIA_TYPE, write_report


class TestWriteReport:
    def test_constants(self):
        assert REPORT_FILENAME == "report.tex"
        assert REPORT_MEDIA_TYPE == "application/x-latex"

    def test_writes_to_given_file(self, tmp_path):
        out = tmp_path / "lab3.tex"
        path = write_report("\\documentclass{article}\n", out)
        assert path == out
        assert out.read_text(encoding="utf-8") == "\\documentclass{article}\n"

    def test_directory_receives_report_tex(self, tmp_path):
        path = write_report("x", tmp_path)
        assert path == tmp_path / "report.tex"
        assert path.read_text(encoding="utf-8") == "x"

    def test_creates_missing_parent_directories(self, tmp_path):
        out = tmp_path / "reports" / "week3" / "report.tex"
        write_report("x", out)
        assert out.exists()

    def test_non_ascii_is_written_as_utf8(self, tmp_path):
        out = tmp_path / "r.tex"
        write_report("Ω ± 0.5 µs", out)
        assert out.read_bytes() == "Ω ± 0.5 µs".encode("utf-8")
