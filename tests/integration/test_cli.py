"""
Integration tests for the format_document command line entry point
"""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from format_document import main


class TestFormatDocumentCLI:

    def test_writes_output_file(self, tmp_path, capsys):
        source = tmp_path / "notes.txt"
        source.write_text("INTRODUCTION\nSome body.", encoding="utf-8")
        target = tmp_path / "out" / "notes.md"

        assert main([str(source), "-o", str(target), "--preset", "minimal"]) == 0
        assert target.read_text(encoding="utf-8") == "# INTRODUCTION\nSome body.\n"
        assert "Formatted document written" in capsys.readouterr().out

    def test_prints_to_stdout_with_stats(self, tmp_path, capsys):
        source = tmp_path / "report.md"
        source.write_text("# Report\n\nBody text.", encoding="utf-8")

        assert main([str(source), "--stats"]) == 0
        out = capsys.readouterr().out
        assert "# Report" in out
        assert "DOCUMENT STATISTICS" in out
        assert "Headers:      1" in out

    def test_chunked_run(self, tmp_path, capsys):
        source = tmp_path / "long.txt"
        source.write_text("word " * 100, encoding="utf-8")

        assert main([str(source), "--chunk-size", "100", "--threshold", "200", "--stats"]) == 0
        assert "chunked (5 chunk(s))" in capsys.readouterr().out

    def test_missing_input(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.txt")]) == 1
        assert "Input file not found" in capsys.readouterr().err

    def test_invalid_chunk_size(self, tmp_path, capsys):
        source = tmp_path / "long.txt"
        source.write_text("word " * 100, encoding="utf-8")
        assert main([str(source), "--chunk-size", "0", "--threshold", "200"]) == 1
        assert "Formatting failed" in capsys.readouterr().err

    def test_merge_documents(self, tmp_path, capsys):
        first = tmp_path / "a.md"
        first.write_text("# Executive Summary\nAlpha.", encoding="utf-8")
        second = tmp_path / "b.md"
        second.write_text("# Executive Summary\nBeta.\n\n# Timeline\nQ1.", encoding="utf-8")

        assert main([str(first), "--merge", str(second), "--preset", "minimal"]) == 0
        captured = capsys.readouterr()
        assert "Merged 2 document(s) into 2 section(s)" in captured.err
        assert "Executive Summary" in captured.out
        assert "Alpha." in captured.out and "Beta." in captured.out
        assert "Timeline" in captured.out

    def test_merge_missing_file(self, tmp_path, capsys):
        first = tmp_path / "a.md"
        first.write_text("# Scope\nIn.", encoding="utf-8")
        assert main([str(first), "--merge", str(tmp_path / "gone.md")]) == 1
        assert "Input file not found" in capsys.readouterr().err
