import asyncio
import json
import logging
import textwrap
from pathlib import Path
from typing import Dict, Optional

import aiofiles
from tqdm import tqdm

from converter.channel import HandOffChannel
from converter.errors import WriteError
from converter.stats import ConversionStats

logger = logging.getLogger(__name__)


def output_path(csv_path, pretty: bool) -> Path:
    """
    Return the JSON file written for csv_path.

    The input extension is replaced by -pretty.json or -compact.json, in the
    same directory, so both modes can be written next to each other.
    """
    csv_path = Path(csv_path)
    mode = "pretty" if pretty else "compact"
    return csv_path.with_name(f"{csv_path.stem}-{mode}.json")


def serialize_record(record: Dict[str, str], pretty: bool = False, indent: int = 3) -> str:
    """Serialize one row. Pretty output is shifted right by one indent level."""
    if pretty:
        data = json.dumps(record, ensure_ascii=False, indent=indent)
        return textwrap.indent(data, " " * indent)
    return json.dumps(record, ensure_ascii=False, separators=(",", ":"))


class JsonArrayWriter:
    """
    Stream a JSON array to a file one element at a time.

    Use as an async context manager: the opening bracket is written on enter,
    the closing bracket on a clean exit, and the file is closed on every exit
    path. Nothing but the current element is held in memory.
    """

    def __init__(self, path, pretty: bool = False, indent: int = 3, encoding: str = "utf-8"):
        self.path = Path(path)
        self.pretty = pretty
        self.indent = indent
        self.encoding = encoding
        self.break_line = "\n" if pretty else ""
        self.count = 0
        self._file = None

    async def __aenter__(self) -> "JsonArrayWriter":
        try:
            self._file = await aiofiles.open(self.path, "w", encoding=self.encoding)
        except OSError as e:
            raise WriteError(f"cannot create {self.path}: {e}") from e

        try:
            await self._write("[" + self.break_line)
        except BaseException:
            await self._close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb):
        try:
            if exc_type is None:
                await self._write(self.break_line + "]")
                await self._file.flush()
        finally:
            await self._close()

    async def write(self, record: Dict[str, str]):
        """Append one row to the array."""
        chunk = serialize_record(record, self.pretty, self.indent)
        if self.count:
            chunk = "," + self.break_line + chunk
        await self._write(chunk)
        self.count += 1

    async def _write(self, data: str):
        try:
            await self._file.write(data)
        except OSError as e:
            raise WriteError(f"cannot write to {self.path}: {e}") from e

    async def _close(self):
        if self._file is None:
            return
        f, self._file = self._file, None
        try:
            await f.close()
        except OSError as e:
            raise WriteError(f"cannot close {self.path}: {e}") from e


async def write_json_file(
    csv_path,
    channel: HandOffChannel,
    done: asyncio.Future,
    pretty: bool = False,
    indent: int = 3,
    encoding: str = "utf-8",
    stats: Optional[ConversionStats] = None,
    progress: bool = False,
    progress_interval: int = 10000,
):
    """
    Consume rows from the channel and write them as a JSON array.

    The done future is resolved exactly once: with the run's stats when the
    channel is closed and the file is complete, or with the error that
    stopped the writer.
    """
    stats = stats or ConversionStats()
    json_path = output_path(csv_path, pretty)
    stats.output_path = str(json_path)

    print("Writing JSON file...")
    try:
        async with JsonArrayWriter(json_path, pretty, indent, encoding) as writer:
            with tqdm(desc="Converting rows", unit="rows", disable=not progress) as pbar:
                async for record in channel:
                    await writer.write(record)
                    stats.rows_written += 1
                    pbar.update(1)

                    if stats.rows_written % progress_interval == 0:
                        logger.info(f"Processed {stats.rows_written} rows...")
    except Exception as e:
        if not done.done():
            done.set_exception(e)
        raise

    print("Completed!")
    logger.info(f"Saved {stats.rows_written} records to {json_path}")
    if not done.done():
        done.set_result(stats)
