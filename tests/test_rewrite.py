import os
from pathlib import Path

import pytest

from textconv.errors import InvalidValueError, MissingArgumentError
from textconv.models import Convention, LineEnding
from textconv.rewrite import append_lines, read_lines, resolve_convention, rewrite_all_lines
from textconv.settings import get_settings

BOM = b"\xef\xbb\xbf"


def _strip_endings(data: bytes) -> list:
    return data.decode("utf-8").splitlines()


def test_new_file_uses_native_line_ending_without_bom(tmp_path: Path):
    path = tmp_path / "new.txt"

    convention = rewrite_all_lines(path, ["a", "b", "c"])

    data = path.read_bytes()
    native = os.linesep.encode()
    assert data == b"a" + native + b"b" + native + b"c" + native
    assert not data.startswith(BOM)
    assert _strip_endings(data) == ["a", "b", "c"]
    assert convention == Convention(line_ending=LineEnding.native(), has_bom=False)


def test_new_file_uses_caller_defaults(tmp_path: Path):
    path = tmp_path / "new.txt"

    rewrite_all_lines(path, iter(["a", "b"]), LineEnding.CRLF, True)

    assert path.read_bytes() == BOM + b"a\r\nb\r\n"


def test_existing_crlf_bom_file_keeps_its_convention(tmp_path: Path):
    path = tmp_path / "win.txt"
    path.write_bytes(BOM + b"old\r\nlines\r\n")

    convention = rewrite_all_lines(path, ["new", "content"], LineEnding.LF, False)

    assert path.read_bytes() == BOM + b"new\r\ncontent\r\n"
    assert convention == Convention(line_ending=LineEnding.CRLF, has_bom=True)


def test_existing_cr_file_keeps_cr(tmp_path: Path):
    path = tmp_path / "mac.txt"
    path.write_bytes(b"a\rb\r")

    rewrite_all_lines(path, ["x", "y"], LineEnding.CRLF)

    assert path.read_bytes() == b"x\ry\r"


def test_existing_file_without_line_endings_uses_fallback_ending(tmp_path: Path):
    path = tmp_path / "flat.txt"
    path.write_bytes(b"abc")

    rewrite_all_lines(path, ["x"], LineEnding.LF, True)

    # "abc" is evidence of no BOM; only the line ending falls back.
    assert path.read_bytes() == b"x\n"


def test_existing_empty_file_falls_back_for_bom(tmp_path: Path):
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")

    rewrite_all_lines(path, ["x"], LineEnding.LF, True)

    assert path.read_bytes() == BOM + b"x\n"


def test_embedded_line_endings_are_normalised(tmp_path: Path):
    path = tmp_path / "unix.txt"
    path.write_bytes(b"start\n")

    rewrite_all_lines(path, ["a\r\nb", "c\rd", "e\nf"])

    assert path.read_bytes() == b"a\nb\nc\nd\ne\nf\n"


def test_empty_lines_sequence_truncates(tmp_path: Path):
    path = tmp_path / "unix.txt"
    path.write_bytes(b"start\n")

    rewrite_all_lines(path, [])

    assert path.read_bytes() == b""


def test_configured_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TEXTCONV_DEFAULT_LINE_ENDING", "crlf")
    monkeypatch.setenv("TEXTCONV_DEFAULT_BOM", "true")
    get_settings.cache_clear()

    path = tmp_path / "new.txt"
    rewrite_all_lines(path, ["a"])

    assert path.read_bytes() == BOM + b"a\r\n"


def test_resolve_convention_missing_file_returns_fallback(tmp_path: Path):
    fallback = Convention(line_ending=LineEnding.CR, has_bom=True)

    assert resolve_convention(tmp_path / "missing.txt", fallback) is fallback


def test_resolve_convention_existing_file(tmp_path: Path):
    path = tmp_path / "lf.txt"
    path.write_bytes(b"a\nb\r\n")
    fallback = Convention(line_ending=LineEnding.CRLF, has_bom=True)

    assert resolve_convention(path, fallback) == Convention(line_ending=LineEnding.LF, has_bom=False)


def test_validation_happens_before_io(tmp_path: Path):
    path = tmp_path / "keep.txt"
    path.write_bytes(b"keep\n")

    with pytest.raises(MissingArgumentError):
        rewrite_all_lines(None, ["a"])
    with pytest.raises(MissingArgumentError):
        rewrite_all_lines(path, None)
    with pytest.raises(InvalidValueError):
        rewrite_all_lines("   ", ["a"])
    with pytest.raises(InvalidValueError):
        rewrite_all_lines("", ["a"])
    with pytest.raises(InvalidValueError):
        rewrite_all_lines(path, "not a list")

    assert path.read_bytes() == b"keep\n"


def test_argument_errors_are_builtin_subclasses():
    with pytest.raises(TypeError):
        rewrite_all_lines(None, [])
    with pytest.raises(ValueError):
        rewrite_all_lines(" \t", [])


def test_io_errors_propagate(tmp_path: Path):
    with pytest.raises(OSError):
        rewrite_all_lines(tmp_path, ["a"])
    with pytest.raises(FileNotFoundError):
        rewrite_all_lines(tmp_path / "no" / "such" / "dir.txt", ["a"])


def test_append_lines_rewrites_with_existing_convention(tmp_path: Path):
    path = tmp_path / "log.txt"
    path.write_bytes(BOM + b"one\r\ntwo")

    append_lines(path, "three", "four")

    assert path.read_bytes() == BOM + b"one\r\ntwo\r\nthree\r\nfour\r\n"


def test_append_lines_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        append_lines(tmp_path / "missing.txt", "a")


def test_append_lines_rejects_none_line(tmp_path: Path):
    path = tmp_path / "log.txt"
    path.write_bytes(b"one\n")

    with pytest.raises(MissingArgumentError):
        append_lines(path, "a", None)
    assert path.read_bytes() == b"one\n"


def test_read_lines_strips_bom_and_terminators(tmp_path: Path):
    path = tmp_path / "mixed.txt"
    path.write_bytes(BOM + b"a\r\nb\rc\n")

    assert read_lines(path) == ["a", "b", "c"]
