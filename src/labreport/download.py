"""Saving the generated report."""

from pathlib import Path

REPORT_FILENAME = "report.tex"
REPORT_MEDIA_TYPE = "application/x-latex"


def write_report(latex: str, output: Path) -> Path:
    """Write *latex* to *output*, or to ``output/report.tex`` if it is a directory."""
    path = output / REPORT_FILENAME if output.is_dir() else output
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(latex, encoding="utf-8")
    return path
