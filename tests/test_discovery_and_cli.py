"""Tests for report discovery and the command-line entry point."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

import main
from core.schema import ReportFormat
from extraction.discovery import iter_reports


def test_iter_reports_walks_tree(tmp_path: Path) -> None:
    (tmp_path / "workshop" / "golf").mkdir(parents=True)
    (tmp_path / "workshop" / "golf" / "scan.txt").write_text("x")
    (tmp_path / "workshop" / "export.XML").write_text("<a/>")
    (tmp_path / "print.pdf").write_bytes(b"%PDF-1.4")
    (tmp_path / "notes.csv").write_text("x")
    (tmp_path / ".hidden.txt").write_text("x")
    found = [(p.relative_to(tmp_path).as_posix(), fmt) for p, fmt in iter_reports(tmp_path)]
    assert found == [
        ("print.pdf", ReportFormat.PDF),
        ("workshop/export.XML", ReportFormat.XML),
        ("workshop/golf/scan.txt", ReportFormat.TXT),
    ]


def test_iter_reports_missing_root(tmp_path: Path) -> None:
    assert list(iter_reports(tmp_path / "nope")) == []


def test_cli_writes_json_and_csv(
    tmp_path: Path,
    sample_report_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(main, "setup_logging", lambda level: None)
    monkeypatch.chdir(tmp_path)
    out_dir = tmp_path / "out"
    code = main.main([str(sample_report_path), "--output-dir", str(out_dir), "--config", str(tmp_path / "none.yaml")])
    assert code == 0
    data = json.loads((out_dir / main.RESULTS_JSON).read_text(encoding="utf-8"))
    assert data[0]["source"] == str(sample_report_path)
    assert data[0]["success"] is True
    assert len(data[0]["errorCodes"]) == 9
    with open(out_dir / main.ERROR_CODES_CSV, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["code"] for r in rows][:2] == ["17158", "5250"]
    assert rows[0]["module"] == "01-Engine"
    assert rows[0]["status_flags"] == "confirmed"
    assert "Batch complete." in capsys.readouterr().out


def test_cli_exit_code_on_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "setup_logging", lambda level: None)
    monkeypatch.chdir(tmp_path)
    code = main.main([str(tmp_path / "missing.txt"), "--output-dir", str(tmp_path / "out")])
    assert code == 1
