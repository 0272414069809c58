"""Exceptions raised while converting a CSV file to JSON."""


class ConversionError(Exception):
    """Base class for every error the converter reports to the user."""


class ConfigurationError(ConversionError):
    """Bad arguments, bad config file or an input that cannot be converted."""


class StructuralReadError(ConversionError):
    """The input could not be opened or parsed; the run is aborted."""


class EmptyInputError(StructuralReadError):
    """The input has no header record."""


class RowShapeError(ConversionError):
    """A data row does not have as many fields as the header."""

    def __init__(self, line_number, expected, found):
        self.line_number = line_number
        self.expected = expected
        self.found = found
        super().__init__(
            f"line {line_number} has {found} fields but the header has {expected}. Skipping"
        )


class WriteError(ConversionError):
    """The JSON output could not be created or written."""
