"""Unit tests for file type derivation and binary detection."""

from pathlib import Path

from ctxgen.filesystem.filetype import UNKNOWN_TYPE, file_type_for, is_binary_file


class TestFileTypeFor:
    """Tests for file_type_for function."""

    def test_extension(self) -> None:
        assert file_type_for("main.go") == "go"

    def test_lower_case(self) -> None:
        assert file_type_for("README.MD") == "md"

    def test_last_suffix(self) -> None:
        assert file_type_for("archive.tar.gz") == "gz"

    def test_no_extension(self) -> None:
        assert file_type_for("Makefile") == UNKNOWN_TYPE

    def test_dotfile(self) -> None:
        """Dotfiles have no extension."""
        assert file_type_for(".gitignore") == UNKNOWN_TYPE


class TestIsBinaryFile:
    """Tests for is_binary_file function."""

    def test_text_extension_is_never_read(self, tmp_path: Path) -> None:
        """Known text extensions are text even with NUL bytes."""
        path = tmp_path / "data.json"
        path.write_bytes(b"\x00\x01")

        assert not is_binary_file(str(path))

    def test_nul_byte(self, tmp_path: Path) -> None:
        path = tmp_path / "blob"
        path.write_bytes(b"abc\x00def")

        assert is_binary_file(str(path))

    def test_utf8_text(self, tmp_path: Path) -> None:
        path = tmp_path / "notes"
        path.write_text("grüße aus köln\n", encoding="utf-8")

        assert not is_binary_file(str(path))

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty"
        path.write_bytes(b"")

        assert not is_binary_file(str(path))

    def test_mostly_printable_latin1(self, tmp_path: Path) -> None:
        """Invalid UTF-8 that is mostly printable ASCII counts as text."""
        path = tmp_path / "legacy"
        path.write_bytes(b"plain ascii text with one latin-1 byte \xe9 here\n")

        assert not is_binary_file(str(path))

    def test_high_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "noise"
        path.write_bytes(bytes(range(0x80, 0x100)))

        assert is_binary_file(str(path))

    def test_unreadable_counts_as_binary(self, tmp_path: Path) -> None:
        assert is_binary_file(str(tmp_path / "missing"))
