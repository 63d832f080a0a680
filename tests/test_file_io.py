# tests/test_file_io.py
import codecs
import os
import stat

import pytest

from sql_concatenator.domain.errors import FileReadError, WriteError
from sql_concatenator.infrastructure import file_io
from sql_concatenator.infrastructure.file_io import (
    ScriptWriter,
    SourceFileReader,
    detect_encoding,
)


@pytest.mark.parametrize("raw, expected", [
    (codecs.BOM_UTF8 + b"x", "utf-8-sig"),
    (codecs.BOM_UTF16_LE + b"x\x00", "utf-16"),
    (codecs.BOM_UTF16_BE + b"\x00x", "utf-16"),
    (codecs.BOM_UTF32_LE + b"x\x00\x00\x00", "utf-32"),
    (codecs.BOM_UTF32_BE + b"\x00\x00\x00x", "utf-32"),
    (b"SELECT 1;", "utf-8"),
    (b"", "utf-8"),
])
def test_detect_encoding(raw, expected):
    assert detect_encoding(raw) == expected


def test_detect_encoding_uses_configured_default():
    assert detect_encoding(b"SELECT 1;", default="cp1252") == "cp1252"


def test_reader_uses_default_encoding_without_bom(tmp_path):
    path = tmp_path / "legacy.sql"
    path.write_bytes("SELECT 'café';".encode("cp1252"))

    reader = SourceFileReader(default_encoding="cp1252", errors="strict")

    assert reader.read_text(path) == "SELECT 'café';"


def test_reader_wraps_missing_file(tmp_path):
    missing = tmp_path / "missing.sql"

    with pytest.raises(FileReadError) as excinfo:
        SourceFileReader().read_text(missing)

    assert excinfo.value.path == str(missing)
    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_reader_wraps_directory(tmp_path):
    with pytest.raises(FileReadError):
        SourceFileReader().read_text(tmp_path)


def test_reader_wraps_unknown_encoding(tmp_path):
    path = tmp_path / "a.sql"
    path.write_bytes(b"SELECT 1;")

    with pytest.raises(FileReadError):
        SourceFileReader(default_encoding="no-such-codec").read_text(path)


def test_is_readable_file(tmp_path):
    path = tmp_path / "a.sql"
    path.write_text("SELECT 1;", encoding="utf-8")

    assert SourceFileReader.is_readable_file(path) is True
    assert SourceFileReader.is_readable_file(tmp_path) is False
    assert SourceFileReader.is_readable_file(tmp_path / "missing.sql") is False


def test_writer_emits_utf8_bom(tmp_path):
    destination = tmp_path / "out.sql"

    written = ScriptWriter().write(destination, "SELECT 'ü';\r\nGO\r\n")

    data = destination.read_bytes()
    assert data.startswith(codecs.BOM_UTF8)
    assert data[len(codecs.BOM_UTF8):] == "SELECT 'ü';\r\nGO\r\n".encode("utf-8")
    assert written == len(data)


def test_writer_overwrites_existing_file(tmp_path):
    destination = tmp_path / "out.sql"
    destination.write_text("old content that is longer than the new one", encoding="utf-8")

    ScriptWriter().write(destination, "new\r\n")

    assert destination.read_bytes() == codecs.BOM_UTF8 + b"new\r\n"


def test_writer_fails_for_missing_directory(tmp_path):
    destination = tmp_path / "no" / "such" / "dir" / "out.sql"

    with pytest.raises(WriteError) as excinfo:
        ScriptWriter().write(destination, "SELECT 1;\r\n")

    assert excinfo.value.destination == destination
    assert not destination.exists()


def test_failed_write_leaves_destination_and_no_temp_files(tmp_path, monkeypatch):
    destination = tmp_path / "out.sql"
    destination.write_bytes(b"previous script")

    def failing_replace(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(file_io.os, "replace", failing_replace)

    with pytest.raises(WriteError) as excinfo:
        ScriptWriter().write(destination, "SELECT 1;\r\n")

    assert "No space left on device" in str(excinfo.value)
    assert destination.read_bytes() == b"previous script"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["out.sql"]


posix_only = pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")


@pytest.fixture
def umask_022():
    previous = os.umask(0o022)
    yield
    os.umask(previous)


@posix_only
def test_new_file_respects_umask(tmp_path, umask_022):
    destination = tmp_path / "out.sql"

    ScriptWriter().write(destination, "SELECT 1;\r\n")

    assert stat.S_IMODE(destination.stat().st_mode) == 0o644


@posix_only
def test_overwrite_keeps_existing_mode(tmp_path, umask_022):
    destination = tmp_path / "out.sql"
    destination.write_bytes(b"old")
    os.chmod(destination, 0o640)

    ScriptWriter().write(destination, "SELECT 1;\r\n")

    assert stat.S_IMODE(destination.stat().st_mode) == 0o640


@posix_only
def test_overwrite_through_symlink_keeps_link(tmp_path):
    real = tmp_path / "real.sql"
    real.write_bytes(b"old")
    link = tmp_path / "link.sql"
    link.symlink_to(real)

    ScriptWriter().write(link, "SELECT 1;\r\n")

    assert link.is_symlink()
    assert real.read_bytes() == codecs.BOM_UTF8 + b"SELECT 1;\r\n"
