import asyncio
import csv
import logging
from collections import deque
from typing import Dict, List, Optional, Sequence, Tuple

from converter.channel import HandOffChannel
from converter.errors import EmptyInputError, RowShapeError, StructuralReadError
from converter.input_file import InputFile
from converter.stats import ConversionStats

logger = logging.getLogger(__name__)

# Records parsed per worker-thread call
READ_BATCH_SIZE = 512

# Characters removed from both ends of every field value
VALUE_TRIM_CHARS = ' \t\r\n"'


def build_row(headers: Sequence[str], fields: List[str], line_number: int = 0) -> Dict[str, str]:
    """
    Zip header names with the fields of one data line.

    Args:
        headers: Trimmed column names
        fields: Raw fields as returned by the csv parser
        line_number: Line of the record in the input, used in the error message

    Returns:
        Ordered mapping of column name to trimmed value

    Raises:
        RowShapeError: If the number of fields differs from the number of headers
    """
    if len(fields) != len(headers):
        raise RowShapeError(line_number, len(headers), len(fields))

    return {name: value.strip(VALUE_TRIM_CHARS) for name, value in zip(headers, fields)}


class CSVRecordReader:
    """
    Producer side of the conversion.

    open() reads the header so that an unusable input is reported before any
    output file exists. run() then pushes one row dict per data line into the
    channel and closes it when the input is exhausted.
    """

    def __init__(
        self,
        input_file: InputFile,
        encoding: str = "utf-8-sig",
        stats: Optional[ConversionStats] = None,
        batch_size: int = READ_BATCH_SIZE,
    ):
        self.input_file = input_file
        self.encoding = encoding
        self.stats = stats or ConversionStats()
        self.batch_size = batch_size
        self.headers: Tuple[str, ...] = ()
        self.line_num = 0
        self._file = None
        self._rows = None
        self._pending = deque()
        self._read_error = None
        self._eof = False

    async def open(self) -> Tuple[str, ...]:
        """Open the input and read the header record."""
        path = self.input_file.filepath
        try:
            self._file = await asyncio.to_thread(
                open, path, "r", encoding=self.encoding, newline=""
            )
        except OSError as e:
            raise StructuralReadError(f"cannot open {path}: {e}") from e

        # The default (non-strict) dialect accepts stray quotes inside fields.
        self._rows = csv.reader(self._file, delimiter=self.input_file.delimiter, strict=False)

        try:
            header = await self._next_record()
            if header is None:
                raise EmptyInputError(f"file {path} is empty, no header line found")
        except BaseException:
            await self.close()
            raise

        self.headers = tuple(name.strip() for name in header)
        logger.info(f"Reading CSV file: {path}")
        logger.debug(f"Columns: {list(self.headers)}")
        return self.headers

    def _read_batch(self):
        """
        Parse up to batch_size records. Runs in a worker thread.

        Returns:
            Tuple of ([(line_num, fields), ...], error). A parse or I/O error
            is returned after the records read before it, not raised.
        """
        records = []
        try:
            for fields in self._rows:
                records.append((self._rows.line_num, fields))
                if len(records) >= self.batch_size:
                    break
        except (csv.Error, UnicodeDecodeError, OSError) as e:
            return records, e
        return records, None

    async def _next_record(self) -> Optional[List[str]]:
        """Return the next non-blank record, or None at end of input."""
        while True:
            if not self._pending:
                if self._read_error is not None:
                    e, self._read_error = self._read_error, None
                    raise StructuralReadError(
                        f"{self.input_file.filepath}, line {self._rows.line_num}: {e}"
                    ) from e
                if self._eof:
                    return None

                records, self._read_error = await asyncio.to_thread(self._read_batch)
                if len(records) < self.batch_size and self._read_error is None:
                    self._eof = True
                self._pending.extend(records)
                continue

            self.line_num, fields = self._pending.popleft()
            # Blank lines carry no fields and are not data rows
            if fields:
                return fields

    async def run(self, channel: HandOffChannel):
        """Read every data line and send the converted rows downstream."""
        if self._rows is None:
            await self.open()

        try:
            while True:
                fields = await self._next_record()
                if fields is None:
                    await channel.close()
                    break

                self.stats.rows_read += 1
                try:
                    record = build_row(self.headers, fields, self.line_num)
                except RowShapeError as e:
                    self.stats.rows_skipped += 1
                    logger.warning(f"Line: {fields} Error: {e}")
                    continue

                await channel.send(record)
        finally:
            await self.close()

        logger.debug(
            f"Finished reading {self.stats.rows_read} rows "
            f"({self.stats.rows_skipped} skipped)"
        )

    async def close(self):
        if self._file is not None:
            f, self._file = self._file, None
            await asyncio.to_thread(f.close)
