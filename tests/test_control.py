import pytest

from debpack.ar import package_filename
from debpack.control import MANDATORY_FIELDS, ControlSet
from debpack.errors import ControlEncodingError, MalformedControlError

from conftest import DEMO_CONTROL


def test_parse_preserves_values_and_order():
    cs = ControlSet.parse_text(DEMO_CONTROL + "Homepage: http://example.com:8080/a\n")
    assert list(cs) == ["Package", "Version", "Architecture", "Maintainer", "Description", "Homepage"]
    assert cs["Package"] == "demo"
    assert cs["Homepage"] == "http://example.com:8080/a"


def test_parse_from_file_records_source(control_dir):
    path = control_dir / "control"
    cs = ControlSet.parse(path)
    assert cs.source == path
    assert cs.validate() is cs


def test_delimiter_swallows_surrounding_whitespace():
    cs = ControlSet.parse_text("Package   :   demo\n")
    assert cs["Package"] == "demo"


def test_continuation_lines_are_folded():
    folded = ControlSet.parse_text("Description: short summary\n  longer text\n\tand more\nVersion: 1\n")
    single = ControlSet.parse_text("Description: short summary longer text and more\nVersion: 1\n")
    assert folded["Description"] == single["Description"]
    assert folded["Version"] == "1"


def test_duplicate_field_overwrites_but_keeps_slot():
    cs = ControlSet.parse_text("Package: a\nVersion: 1\nPackage: b\n")
    assert list(cs) == ["Package", "Version"]
    assert cs["Package"] == "b"


@pytest.mark.parametrize("missing", MANDATORY_FIELDS)
def test_validate_reports_missing_field(missing, tmp_path):
    path = tmp_path / "control"
    path.write_text("".join(line + "\n" for line in DEMO_CONTROL.splitlines()
                            if not line.startswith(missing + ":")))
    with pytest.raises(MalformedControlError) as exc:
        ControlSet.parse(path).validate()
    assert exc.value.field == missing
    assert exc.value.source == path
    assert missing in str(exc.value)
    assert str(path) in str(exc.value)


def test_validate_fails_on_first_missing_in_fixed_order():
    cs = ControlSet.parse_text("Description: x\nMaintainer: a@b\n")
    with pytest.raises(MalformedControlError) as exc:
        cs.validate()
    assert exc.value.field == "Package"


@pytest.mark.parametrize("total,expected", [
    (0, "0"),
    (1023, "0"),
    (1024, "1"),
    (1535, "1"),
    (2048, "2"),
])
def test_with_installed_size(total, expected):
    cs = ControlSet.parse_text(DEMO_CONTROL)
    final = cs.with_installed_size(total)
    assert final["Installed-Size"] == expected
    assert "Installed-Size" not in cs
    assert list(final)[-1] == "Installed-Size"


def test_with_installed_size_overwrites_existing_value_in_place():
    cs = ControlSet.parse_text("Package: demo\nInstalled-Size: 999\nVersion: 1\n")
    final = cs.with_installed_size(4096)
    assert list(final) == ["Package", "Installed-Size", "Version"]
    assert final["Installed-Size"] == "4"


def test_serialize_skips_empty_names():
    cs = ControlSet.parse_text("Package: demo\n\nVersion: 1.0\n")
    assert "" in cs
    assert cs.serialize() == "Package: demo\nVersion: 1.0\n"


def test_lines_without_delimiter_are_ignored():
    cs = ControlSet.parse_text("Package: demo\ngarbage\nVersion: 1.0\n")
    assert list(cs) == ["Package", "Version"]


def test_non_utf8_control_file(tmp_path):
    path = tmp_path / "control"
    path.write_bytes(DEMO_CONTROL.replace("a@b", "\xe9t\xe9").encode("latin-1"))
    with pytest.raises(ControlEncodingError) as exc:
        ControlSet.parse(path)
    assert exc.value.source == path
    assert str(path) in str(exc.value)


def test_trailing_whitespace_is_dropped_from_values():
    cs = ControlSet.parse_text("Package: demo\nVersion: 1.0 \t\nArchitecture: amd64\r\n")
    assert cs["Version"] == "1.0"
    assert package_filename(cs) == "demo_1.0-amd64.deb"
    assert cs.serialize() == "Package: demo\nVersion: 1.0\nArchitecture: amd64\n"
