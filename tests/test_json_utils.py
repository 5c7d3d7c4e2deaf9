"""Tests for treejson.json_utils — atomic JSON writing."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from treejson.convert import to_tree
from treejson.escape import InvalidUTF8Error
from treejson.json_utils import write_json_atomically
from treejson.nodes import JsonNode


class TestWriteJsonAtomically:
    def test_basic(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        write_json_atomically(path, to_tree({"key": "value"}))

        assert path.exists()
        loaded = json.loads(path.read_text())
        assert loaded == {"key": "value"}

    def test_pretty_with_trailing_newline(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        n = write_json_atomically(path, to_tree({"a": 1}))

        text = path.read_text()
        assert text == '{\n  "a": 1\n}\n'
        assert n == len(text)

    def test_compact_no_newline(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        write_json_atomically(path, to_tree([1, 2]), indent=0, trailing_newline=False)

        assert path.read_bytes() == b"[1,2]"

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "deep" / "out.json"
        write_json_atomically(path, to_tree({"a": 1}))

        assert path.exists()
        loaded = json.loads(path.read_text())
        assert loaded["a"] == 1

    def test_no_tmp_file_left(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        write_json_atomically(path, to_tree({"a": 1}))

        files = list(tmp_path.iterdir())
        assert len(files) == 1
        assert files[0].name == "out.json"

    def test_overwrite_existing(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        write_json_atomically(path, to_tree({"v": 1}))
        write_json_atomically(path, to_tree({"v": 2}))

        loaded = json.loads(path.read_text())
        assert loaded["v"] == 2

    def test_output_is_ascii(self, tmp_path: Path) -> None:
        path = tmp_path / "unicode.json"
        name = "".join(chr(c) for c in (0x65E5, 0x672C, 0x8A9E))
        write_json_atomically(path, to_tree({"name": name}))

        raw = path.read_bytes()
        assert raw.isascii()
        assert json.loads(raw)["name"] == name

    def test_failed_write_removes_tmp_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def partial_write(self: Path, data: bytes) -> int:
            with open(self, "wb") as f:
                f.write(data[:3])
            raise OSError("No space left on device")

        monkeypatch.setattr(Path, "write_bytes", partial_write)
        path = tmp_path / "out.json"

        with pytest.raises(OSError, match="No space"):
            write_json_atomically(path, to_tree({"a": 1}))
        assert list(tmp_path.iterdir()) == []

    def test_strict_leaves_target_untouched(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        path.write_text("{}")
        root = JsonNode.array(JsonNode.string(b"\x80"))

        with pytest.raises(InvalidUTF8Error):
            write_json_atomically(path, root, strict_utf8=True)
        assert path.read_text() == "{}"
