import asyncio
import logging

from converter.channel import HandOffChannel
from converter.input_file import InputFile
from converter.reader import CSVRecordReader
from converter.stats import ConversionStats
from converter.writer import write_json_file

logger = logging.getLogger(__name__)


async def convert(
    input_file: InputFile,
    indent: int = 3,
    encoding: str = "utf-8-sig",
    progress: bool = False,
    progress_interval: int = 10000,
) -> ConversionStats:
    """
    Convert input_file to a JSON array next to it.

    The reader and the writer run as two tasks joined by a single-slot
    channel. The header is read before the writer starts, so an empty input
    never leaves an output file behind. If either task fails the other one is
    cancelled and the error is raised here.

    Returns:
        ConversionStats for the run
    """
    stats = ConversionStats()
    reader = CSVRecordReader(input_file, encoding=encoding, stats=stats)
    await reader.open()

    channel = HandOffChannel()
    done = asyncio.get_running_loop().create_future()

    reader_task = asyncio.create_task(reader.run(channel), name="csv-reader")
    writer_task = asyncio.create_task(
        write_json_file(
            input_file.filepath,
            channel,
            done,
            pretty=input_file.pretty,
            indent=indent,
            # Output is always plain UTF-8, whatever the input encoding
            encoding="utf-8",
            stats=stats,
            progress=progress,
            progress_interval=progress_interval,
        ),
        name="json-writer",
    )

    try:
        await asyncio.wait({reader_task, done}, return_when=asyncio.FIRST_EXCEPTION)
        if reader_task.done() and not reader_task.cancelled() and reader_task.exception():
            raise reader_task.exception()
        return done.result()
    finally:
        for task in (reader_task, writer_task):
            if not task.done():
                task.cancel()
        await asyncio.gather(reader_task, writer_task, return_exceptions=True)


def run_conversion(input_file: InputFile, **kwargs) -> ConversionStats:
    """Blocking entry point: run convert() on a fresh event loop."""
    logger.info(f"Starting conversion of {input_file.filepath}")
    return asyncio.run(convert(input_file, **kwargs))
