import os
from dataclasses import dataclass
from pathlib import Path

from converter.errors import ConfigurationError

SEPARATORS = {
    "comma": ",",
    "semicolon": ";",
}

CSV_EXTENSION = ".csv"


@dataclass(frozen=True)
class InputFile:
    """A validated conversion request."""

    filepath: str
    separator: str = "comma"
    pretty: bool = False

    @property
    def delimiter(self) -> str:
        return SEPARATORS[self.separator]


def get_file_data(filepath, pretty=False, separator="comma") -> InputFile:
    """
    Build an InputFile from command line values.

    Raises:
        ConfigurationError: If no path is given or the separator is unknown.
    """
    if not filepath:
        raise ConfigurationError("a filepath argument is required")

    if not isinstance(separator, str) or separator not in SEPARATORS:
        raise ConfigurationError("only comma or semicolon separators are allowed")

    return InputFile(str(filepath), separator, bool(pretty))


def is_valid_file(filename) -> bool:
    """
    Check that the file is a CSV and exists.

    Raises:
        ConfigurationError: If the extension is not .csv or the file is missing.
    """
    if Path(filename).suffix.lower() != CSV_EXTENSION:
        raise ConfigurationError(f"file {filename} is not CSV")

    if not os.path.isfile(filename):
        raise ConfigurationError(f"file {filename} does not exist")

    return True
