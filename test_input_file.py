import pytest

from converter.errors import ConfigurationError
from converter.input_file import InputFile, get_file_data, is_valid_file


@pytest.mark.parametrize(
    "args, expected",
    [
        (("test.csv",), InputFile("test.csv", "comma", False)),
        (("test.csv", False, "semicolon"), InputFile("test.csv", "semicolon", False)),
        (("test.csv", True), InputFile("test.csv", "comma", True)),
        (("test.csv", True, "semicolon"), InputFile("test.csv", "semicolon", True)),
    ],
)
def test_get_file_data(args, expected):
    assert get_file_data(*args) == expected


def test_get_file_data_requires_path():
    with pytest.raises(ConfigurationError):
        get_file_data(None)


def test_get_file_data_rejects_unknown_separator():
    with pytest.raises(ConfigurationError, match="only comma or semicolon"):
        get_file_data("test.csv", separator="pipe")


def test_delimiter():
    assert InputFile("a.csv").delimiter == ","
    assert InputFile("a.csv", "semicolon").delimiter == ";"


def test_is_valid_file(tmp_path):
    csv_file = tmp_path / "test.csv"
    csv_file.write_text("A,B\n")
    assert is_valid_file(str(csv_file))


def test_is_valid_file_accepts_upper_case_extension(tmp_path):
    csv_file = tmp_path / "TEST.CSV"
    csv_file.write_text("A,B\n")
    assert is_valid_file(str(csv_file))


def test_is_valid_file_rejects_other_extensions(tmp_path):
    txt_file = tmp_path / "test.txt"
    txt_file.write_text("A,B\n")
    with pytest.raises(ConfigurationError, match="is not CSV"):
        is_valid_file(str(txt_file))


def test_is_valid_file_rejects_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="does not exist"):
        is_valid_file(str(tmp_path / "nothing.csv"))
