"""
Tests for the run_critique command-line script.
"""

import json
import sys

import pytest

import run_critique


def test_missing_image_file_exits_with_error(monkeypatch, tmp_path, capsys):
    missing = tmp_path / "missing.jpg"
    monkeypatch.setattr(run_critique, "StyleLens", lambda provider=None: object())
    monkeypatch.setattr(sys, "argv", ["run_critique.py", str(missing)])

    with pytest.raises(SystemExit) as excinfo:
        run_critique.main()

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "✗ Error" in captured.err
    result = json.loads(captured.out)
    assert result["status"] == "error"
    assert result["file"] == str(missing)
