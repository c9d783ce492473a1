import pytest

from mdfmt.cli import format_markdown, has_content_changed, load_config, main
from mdfmt.config import Config, ConfigError

UNFORMATTED = "# Title\n\nSome   text   here.\n"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_has_content_changed_ignores_surrounding_whitespace():
    assert has_content_changed(b"  # Title \n\n", "# Title\n") is False
    assert has_content_changed("# Title", "# Title\n\n") is False


def test_has_content_changed_detects_difference():
    assert has_content_changed(b"* item", "- item\n") is True


def test_format_markdown_keeps_formatted_heading():
    result = format_markdown(b"# Title\n", Config.default())
    assert result.startswith("# Title")
    assert result.endswith("\n")
    assert not has_content_changed(b"# Title\n", result)


def test_format_markdown_normalizes_bullets():
    result = format_markdown(b"* Item 1\n+ Item 2\n- Item 3\n", Config.default())
    items = [line for line in result.splitlines() if line.strip()]
    assert len(items) == 3
    assert all(line.startswith("- Item") for line in items)


def test_format_markdown_collapses_spaces():
    result = format_markdown(UNFORMATTED, Config.default())
    assert "Some text here." in result
    assert "  " not in result


def test_load_config_defaults(workdir):
    cfg = load_config()
    assert cfg == Config.default()


def test_load_config_from_file(workdir):
    path = workdir / "custom.yaml"
    path.write_text("line_width: 100\nlist:\n  bullet_style: \"*\"\n")
    cfg = load_config(str(path))
    assert cfg.line_width == 100
    assert cfg.list.bullet_style == "*"


def test_load_config_discovers_file(workdir):
    (workdir / ".mdfmt.yaml").write_text("line_width: 120\n")
    cfg = load_config("")
    assert cfg.line_width == 120


def test_load_config_invalid(workdir):
    path = workdir / "bad.yaml"
    path.write_text("heading:\n  style: \"invalid\"\n")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_load_config_missing_file(workdir):
    with pytest.raises(ConfigError):
        load_config(str(workdir / "nonexistent.yaml"))


def test_help(capsys):
    assert main(["--help"]) == 0
    assert "USAGE:" in capsys.readouterr().err


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("mdfmt ")


def test_conflicting_modes(workdir, capsys):
    assert main(["-w", "-c", "x.md"]) == 2
    assert "only one of" in capsys.readouterr().err


def test_verbose_and_quiet(workdir, capsys):
    assert main(["-v", "-q", "x.md"]) == 2
    assert "cannot be used together" in capsys.readouterr().err


def test_unknown_option(workdir):
    assert main(["--bogus"]) == 2


def test_no_paths(workdir, capsys):
    assert main([]) == 2
    assert "No input files" in capsys.readouterr().err


def test_missing_path(workdir):
    assert main([str(workdir / "missing.md")]) == 2


def test_bad_config_in_main(workdir, capsys):
    assert main(["--config", str(workdir / "nope.yaml"), "x.md"]) == 2
    assert "Error loading configuration" in capsys.readouterr().err


def test_stdout_mode(workdir, capsys):
    path = workdir / "doc.md"
    path.write_text(UNFORMATTED)
    assert main([str(path)]) == 0
    assert capsys.readouterr().out == format_markdown(UNFORMATTED, Config.default())
    assert path.read_text() == UNFORMATTED


def test_check_mode_needs_changes(workdir):
    path = workdir / "doc.md"
    path.write_text(UNFORMATTED)
    assert main(["--check", str(path)]) == 1


def test_write_then_check(workdir, capsys):
    path = workdir / "doc.md"
    path.write_text(UNFORMATTED)
    assert main(["--write", "--verbose", str(path)]) == 0
    assert f"Formatted: {path}" in capsys.readouterr().out
    assert path.read_text() == format_markdown(UNFORMATTED, Config.default())
    assert main(["--check", str(path)]) == 0


def test_list_mode(workdir, capsys):
    messy = workdir / "messy.md"
    messy.write_text(UNFORMATTED)
    clean = workdir / "clean.md"
    clean.write_text("# Title\n")
    assert main(["--list", str(workdir)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [str(messy)]


def test_diff_mode(workdir, capsys):
    path = workdir / "doc.md"
    path.write_text(UNFORMATTED)
    assert main(["-d", str(path)]) == 0
    out = capsys.readouterr().out
    assert f"--- {path}\n+++ {path}" in out
    assert "File would be reformatted" in out
    assert path.read_text() == UNFORMATTED


def test_no_markdown_files(workdir, capsys):
    (workdir / "notes.txt").write_text("text")
    assert main(["-v", str(workdir)]) == 0
    assert "No markdown files found" in capsys.readouterr().out