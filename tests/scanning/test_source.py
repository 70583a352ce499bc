"""Tests for reading files into SourceUnits."""

import pytest

from perf_wizard.exceptions import BinaryFileError, FileAccessError
from perf_wizard.scanning.dialects import Dialect
from perf_wizard.scanning.source import (
    create_source_unit,
    is_binary_path,
    read_source_unit,
    read_text,
)


class TestReadText:
    """Reading text and rejecting binaries."""

    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "a.js"
        path.write_text("const s = 'é';\n", encoding="utf-8")
        text, size = read_text(path)
        assert text == "const s = 'é';\n"
        assert size == len("const s = 'é';\n".encode("utf-8"))

    def test_binary_extension(self, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(b"not really a png")
        with pytest.raises(BinaryFileError):
            read_text(path)

    def test_nul_bytes(self, tmp_path):
        path = tmp_path / "blob.js"
        path.write_bytes(b"var a\x00\x01\x02;")
        with pytest.raises(BinaryFileError):
            read_text(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileAccessError) as exc_info:
            read_text(tmp_path / "gone.js")
        assert exc_info.value.filepath == tmp_path / "gone.js"

    def test_undecodable_bytes_replaced(self, tmp_path):
        path = tmp_path / "latin.js"
        path.write_bytes(b"const s = '\xe9';\n")
        text, _ = read_text(path)
        assert "�" in text

    def test_is_binary_path(self):
        assert is_binary_path("photo.JPG")
        assert not is_binary_path("app.js")


class TestSourceUnits:
    """Building SourceUnits."""

    def test_script_is_parsed(self):
        unit = create_source_unit("app.js", "run();\n")
        assert unit.parsed
        assert unit.dialect is Dialect.SCRIPT
        assert unit.parse_failure is None

    def test_size_defaults_to_utf8_length(self):
        unit = create_source_unit("a.txt", "é")
        assert unit.size == 2

    def test_text_dialect_not_parsed(self):
        unit = create_source_unit("notes.md", "# hi\n")
        assert not unit.parsed
        assert unit.parse_failure is None

    def test_parse_failure_recorded(self):
        unit = create_source_unit("bad.js", "const = ;\n")
        assert not unit.parsed
        assert unit.parse_failure is not None

    def test_parse_disabled(self):
        unit = create_source_unit("app.js", "run();\n", parse=False)
        assert not unit.parsed
        assert unit.parse_failure is None

    def test_read_source_unit(self, tmp_path):
        path = tmp_path / "App.tsx"
        path.write_text("export const App = () => <div />;\n", encoding="utf-8")
        unit = read_source_unit(path)
        assert unit.path == path
        assert unit.dialect is Dialect.MARKUP
        assert unit.parsed
        assert unit.size == path.stat().st_size
