"""
Tests for the command line entry point.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.elimination import build_bracket
from main import format_bracket, main


class TestPreview:
    """Tests for `main.py preview`."""

    def test_format_bracket(self):
        text = format_bracket(build_bracket(['A', 'B', 'C']))
        assert "Semi-Finals" in text
        assert "M1: A vs B" in text
        assert "M2: C vs BYE  -> C" in text
        assert "Final" in text
        assert "M1: TBD vs C" in text

    def test_preview_prints_bracket(self, capsys):
        assert main(['preview', 'A', 'B', 'C', 'D']) == 0
        out = capsys.readouterr().out
        assert "M2: C vs D" in out

    def test_preview_rejects_duplicates(self, capsys):
        assert main(['preview', 'A', 'A']) == 1
        assert "Duplicate" in capsys.readouterr().err

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])
