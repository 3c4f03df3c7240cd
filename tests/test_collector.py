"""Tests for file collection."""
from asset_uploader.collector import FileCollector


def test_collect_folder_uses_posix_relative_paths(tmp_path):
    (tmp_path / "folder1").mkdir()
    (tmp_path / "folder1" / "example.txt").write_bytes(b"Hello, World!")
    (tmp_path / "top.json").write_bytes(b"{}")

    files = FileCollector.collect(tmp_path)

    assert [(f.name, f.relative_path) for f in files] == [
        ("example.txt", "folder1/example.txt"),
        ("top.json", "top.json"),
    ]
    assert files[0].data == b"Hello, World!"
    assert files[0].mimetype is None


def test_collect_single_file(tmp_path):
    path = tmp_path / "logo.png"
    path.write_bytes(b"png")

    [payload] = FileCollector.collect(path)

    assert payload.name == "logo.png"
    assert payload.relative_path is None
    assert payload.size == 3


def test_collect_empty_folder(tmp_path):
    assert FileCollector.collect(tmp_path) == []
