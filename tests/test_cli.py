"""Tests for the tomato command line."""

import logging
import os

import pytest

from tomato import cli

BUTTON = "button:\n  bg blue-500\n  pad sm md\n"
BUTTON_CSS = "button {\n  background: #3b82f6;\n  padding: 0.5rem 1rem;\n}\n"


@pytest.fixture(autouse=True)
def release_warnings():
    """main() routes warnings to logging; undo it after each test."""
    yield
    logging.captureWarnings(False)


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "app.tom"
    path.write_text(BUTTON, encoding="utf-8")
    return path


class TestCompile:
    def test_default_output(self, source, capsys):
        assert cli.main([str(source)]) == 0

        assert source.with_suffix(".css").read_text(encoding="utf-8") == BUTTON_CSS
        assert "Compiled: app.tom -> app.css" in capsys.readouterr().out

    def test_explicit_output_creates_directories(self, source, tmp_path):
        output = tmp_path / "dist" / "styles.css"

        assert cli.main([str(source), "-o", str(output)]) == 0
        assert output.read_text(encoding="utf-8") == BUTTON_CSS

    def test_scoped(self, source):
        assert cli.main([str(source), "--scoped", "--scope-id", "card"]) == 0

        css = source.with_suffix(".css").read_text(encoding="utf-8")
        assert css.startswith('[data-tom="card"] button {')

    def test_token_file(self, source, tmp_path):
        tokens = tmp_path / "brand.yaml"
        tokens.write_text("colors:\n  blue-500: '#0000ff'\n", encoding="utf-8")

        assert cli.main([str(source), "--tokens", str(tokens)]) == 0
        assert "background: #0000ff;" in source.with_suffix(".css").read_text(encoding="utf-8")

    def test_bad_token_file(self, source, tmp_path, capsys):
        tokens = tmp_path / "brand.yaml"
        tokens.write_text("- nope\n", encoding="utf-8")

        assert cli.main([str(source), "--tokens", str(tokens)]) == 1
        assert "cannot load tokens" in capsys.readouterr().err

    def test_missing_input(self, tmp_path, capsys):
        assert cli.main([str(tmp_path / "missing.tom")]) == 1
        assert "Error in missing.tom" in capsys.readouterr().err

    def test_import_errors_are_printed(self, tmp_path, capsys):
        path = tmp_path / "app.tom"
        path.write_text('@import "gone"\np:\n  bold\n', encoding="utf-8")

        assert cli.main([str(path)]) == 0
        assert 'Cannot import "gone.tom"' in capsys.readouterr().err


class TestLint:
    def test_clean(self, source, capsys):
        assert cli.main(["--lint", str(source)]) == 0
        assert capsys.readouterr().out == ""
        assert not source.with_suffix(".css").exists()

    def test_errors_fail(self, tmp_path, capsys):
        path = tmp_path / "app.tom"
        path.write_text("button:\n  use nothing\n", encoding="utf-8")

        assert cli.main(["--lint", str(path)]) == 1
        assert f"{path}:2: error: Component 'nothing' is not defined." in capsys.readouterr().out

    def test_warnings_pass(self, tmp_path, capsys):
        path = tmp_path / "app.tom"
        path.write_text("button:\n  bolt\n", encoding="utf-8")

        assert cli.main(["--lint", str(path)]) == 0
        assert "[unknown-property]" in capsys.readouterr().out

    def test_missing_input(self, tmp_path):
        assert cli.main(["--lint", str(tmp_path / "missing.tom")]) == 1


class TestWatch:
    def test_snapshot_skips_missing_files(self, source, tmp_path):
        mtimes = cli.snapshot([source, tmp_path / "missing.tom"])

        assert list(mtimes) == [source]

    def test_recompiles_on_change(self, source, monkeypatch, capsys):
        calls = []

        def fake_sleep(_seconds):
            calls.append(_seconds)
            if len(calls) == 1:
                source.write_text("p:\n  bold\n", encoding="utf-8")
                stat = source.stat()
                os.utime(source, (stat.st_atime, stat.st_mtime + 10))
            else:
                raise KeyboardInterrupt

        monkeypatch.setattr(cli.time, "sleep", fake_sleep)

        assert cli.main([str(source), "--watch", "--interval", "0.1"]) == 0

        out = capsys.readouterr().out
        assert out.count("Compiled: app.tom -> app.css") == 2
        assert "Watching 1 file(s)" in out
        assert "Changed: app.tom" in out
        assert "Stopped watching" in out
        assert calls == [0.1, 0.1]
        assert source.with_suffix(".css").read_text(encoding="utf-8") == "p {\n  font-weight: bold;\n}\n"

    def test_watch_missing_input(self, tmp_path):
        assert cli.main([str(tmp_path / "missing.tom"), "--watch"]) == 1
