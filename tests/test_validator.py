import pytest

from jcontainers.validator import (
    APP_DESCRIPTION,
    UTF8_BOM,
    is_likely_utf8_bom,
    iter_files,
    main,
    validate_file,
    validate_paths,
)


def write(path, data):
    path.write_bytes(data)
    return path


def test_bom_detection():
    assert is_likely_utf8_bom(UTF8_BOM + b"{}")
    assert not is_likely_utf8_bom(b"{}")
    assert not is_likely_utf8_bom(b"\xef\xbb")


def test_valid_file(tmp_path):
    path = write(tmp_path / "ok.json", b'{"a": [1, 2, {"b": null}]}')
    assert validate_file(path) is None


def test_duplicate_keys_rejected(tmp_path):
    path = write(tmp_path / "dup.json", b'{"k": 1,\n "k": 2}')
    failure = validate_file(path)
    assert "duplicate" in failure.text
    assert failure.line == 2


def test_nested_duplicates_rejected(tmp_path):
    path = write(tmp_path / "dup.json", b'[{"x": 1, "x": 1}]')
    assert validate_file(path) is not None and "duplicate" in validate_file(path).text


def test_bom_file_fails_with_hint(tmp_path):
    path = write(tmp_path / "bom.json", UTF8_BOM + b"{}")
    failure = validate_file(path)
    assert failure.likely_bom
    assert "UTF-8 without BOM" in failure.format()


@pytest.mark.parametrize("content", [b"42", b'"text"', b"", b"   \n"])
def test_top_level_must_be_container(tmp_path, content):
    path = write(tmp_path / "scalar.json", content)
    failure = validate_file(path)
    assert "'[' or '{' expected" in failure.text


def test_invalid_utf8(tmp_path):
    path = write(tmp_path / "bin.json", b'{"a": "\xff"}')
    failure = validate_file(path)
    assert "unable to decode byte" in failure.text


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        validate_file(tmp_path / "absent.json")


def test_iter_files_recurses(tmp_path):
    sub = tmp_path / "sub"
    sub.mkdir()
    a = write(tmp_path / "a.json", b"{}")
    b = write(sub / "b.json", b"[]")
    assert sorted(iter_files(tmp_path)) == sorted([a, b])
    assert list(iter_files(a)) == [a]
    assert list(iter_files(tmp_path / "nothing")) == []


def test_validate_paths_counts(tmp_path):
    sub = tmp_path / "sub"
    sub.mkdir()
    write(tmp_path / "a.json", b"{}")
    bad = write(sub / "b.json", b"[1,")
    report = validate_paths([tmp_path, tmp_path / "missing"])
    assert report.files_total == 2
    assert report.errors == 1
    assert report.failures[0].path == bad
    assert report.summary() == "1 errors found. 2 files total"


def test_main_with_paths(tmp_path, capsys):
    bad = write(tmp_path / "bad.json", b"{")
    assert main([str(bad)]) == 0
    out = capsys.readouterr().out
    assert f"validation failed: {bad}" in out
    assert "1 errors found. 1 files total" in out
    assert "press any key to close" in out


def test_main_without_arguments(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.startswith(APP_DESCRIPTION + "\n")