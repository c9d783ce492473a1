import os
import threading

import pytest

from mdfmt.config import Config
from mdfmt.processor import FileInfo, FileProcessor, ProcessingResult


def _make_tree(root, names):
    for name in names:
        full = root / name
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_bytes(b"test content")


def test_new_file_processor():
    cfg = Config.default()
    processor = FileProcessor(cfg, True)
    assert processor.config is cfg
    assert processor.verbose is True


@pytest.mark.parametrize(
    "path, expected",
    [
        ("README.md", True),
        ("doc.markdown", True),
        ("file.mdown", True),
        ("script.js", False),
        ("style.css", False),
        ("README.MD", True),
        ("file.txt", False),
        ("test.go", False),
    ],
)
def test_is_markdown_file(path, expected):
    processor = FileProcessor(Config.default(), False)
    assert processor.is_markdown_file(path) is expected


@pytest.mark.parametrize(
    "path, expected",
    [
        ("README.md", False),
        ("node_modules/package.json", True),
        (".git/config", True),
        ("docs/guide.md", False),
        ("node_modules/lib/index.js", True),
        ("vendor/github.com/pkg/errors/errors.go", True),
        ("regular/file.md", False),
    ],
)
def test_should_ignore_file(path, expected):
    processor = FileProcessor(Config.default(), False)
    assert processor.should_ignore_file(path) is expected


def test_find_files(tmp_path):
    _make_tree(
        tmp_path,
        [
            "README.md",
            "docs/guide.md",
            "docs/api.markdown",
            "src/main.go",
            "node_modules/package.json",
            ".git/config",
        ],
    )
    processor = FileProcessor(Config.default(), False)
    files = processor.find_files([str(tmp_path)])
    assert len(files) == 3
    for info in files:
        assert processor.is_markdown_file(info.path)
        assert info.is_directory is False
        assert info.size == len(b"test content")


def test_find_files_in_name_order(tmp_path):
    _make_tree(tmp_path, ["b.md", "a.md", "c/d.md"])
    processor = FileProcessor(Config.default(), False)
    names = [os.path.relpath(f.path, tmp_path) for f in processor.find_files([str(tmp_path)])]
    assert names == ["a.md", "b.md", os.path.join("c", "d.md")]


def test_find_single_file(tmp_path):
    _make_tree(tmp_path, ["one.md"])
    processor = FileProcessor(Config.default(), False)
    files = processor.find_files([str(tmp_path / "one.md")])
    assert [f.path for f in files] == [os.path.abspath(tmp_path / "one.md")]


def test_find_non_markdown_file_is_skipped(tmp_path):
    _make_tree(tmp_path, ["notes.txt"])
    processor = FileProcessor(Config.default(), False)
    assert processor.find_files([str(tmp_path / "notes.txt")]) == []


def test_find_files_deduplicates_paths(tmp_path):
    _make_tree(tmp_path, ["one.md"])
    processor = FileProcessor(Config.default(), False)
    path = str(tmp_path / "one.md")
    assert len(processor.find_files([path, path])) == 1


def test_find_files_wildcard_ignore(tmp_path):
    _make_tree(tmp_path, ["a.md", "b.markdown", "docs/c.markdown"])
    cfg = Config.default()
    cfg.files.ignore_patterns = ["*.markdown"]
    processor = FileProcessor(cfg, False)
    files = processor.find_files([str(tmp_path)])
    assert [os.path.basename(f.path) for f in files] == ["a.md"]


def test_find_files_missing_path(tmp_path):
    processor = FileProcessor(Config.default(), False)
    with pytest.raises(FileNotFoundError):
        processor.find_files([str(tmp_path / "missing.md")])


def test_read_write_file(tmp_path):
    fp = FileProcessor(Config.default(), False)
    target = str(tmp_path / "test.md")
    content = b"# Test Content\n\nThis is a test."
    fp.write_file(target, content)
    assert fp.read_file(target) == content


def test_write_file_replaces_content(tmp_path):
    fp = FileProcessor(Config.default(), False)
    target = str(tmp_path / "test.md")
    fp.write_file(target, b"long original content")
    fp.write_file(target, b"short")
    assert fp.read_file(target) == b"short"


def test_read_missing_file(tmp_path):
    fp = FileProcessor(Config.default(), False)
    with pytest.raises(FileNotFoundError):
        fp.read_file(str(tmp_path / "nope.md"))


def test_verbose_read_prints(tmp_path, capsys):
    fp = FileProcessor(Config.default(), True)
    target = str(tmp_path / "v.md")
    fp.write_file(target, b"x")
    fp.read_file(target)
    out = capsys.readouterr().out
    assert f"Writing file: {target}" in out
    assert f"Reading file: {target}" in out


def test_backup_file(tmp_path):
    fp = FileProcessor(Config.default(), False)
    target = str(tmp_path / "test.md")
    content = b"# Original Content"
    fp.write_file(target, content)
    fp.backup_file(target)
    assert fp.read_file(target + ".backup") == content


def test_process_files():
    processor = FileProcessor(Config.default(), False)
    files = [
        FileInfo(path="test1.md", relative_path="test1.md", size=100),
        FileInfo(path="test2.md", relative_path="test2.md", size=200),
        FileInfo(path="test3.md", relative_path="test3.md", size=300),
    ]
    calls = []
    lock = threading.Lock()

    def mock_processor(info):
        with lock:
            calls.append(info)
        return ProcessingResult(
            file=info, success=True, error=None, changed=False, bytes_read=info.size
        )

    results = processor.process_files(files, mock_processor)
    assert len(results) == len(files)
    assert len(calls) == len(files)
    for result in results:
        assert result.success is True
        assert result.error is None
    assert sorted(r.bytes_read for r in results) == [100, 200, 300]


def test_process_files_empty():
    processor = FileProcessor(Config.default(), False)
    assert processor.process_files([], lambda info: ProcessingResult(file=info)) == []