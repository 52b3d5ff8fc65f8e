import asyncio
import sys
from typing import Callable

STDOUT = 'stdout'
STDERR = 'stderr'

# compose build output carries long single-line progress records
STREAM_LIMIT = 16 * 1024 * 1024

OutputCallback = Callable[[str, bytes], None]


async def process_output_till_done(process: asyncio.subprocess.Process,
                                   verbose: bool,
                                   on_line: OutputCallback | None = None) -> tuple[bytes, bytes]:
    stdout_lines = []
    stderr_lines = []

    async def read_stream(stream, stream_name, echo, output_list):
        while True:
            line = await stream.readline()
            if line:
                if verbose:
                    echo(line)
                if on_line is not None:
                    on_line(stream_name, line)
                output_list.append(line)
            else:
                break

    tasks = [
        read_stream(process.stdout, STDOUT, lambda line: sys.stdout.buffer.write(b' > ' + line), stdout_lines),
        read_stream(process.stderr, STDERR, lambda line: sys.stderr.buffer.write(b' > ' + line), stderr_lines)
    ]

    await asyncio.gather(*tasks)
    await process.wait()

    sys.stdout.flush()
    sys.stderr.flush()

    return b''.join(stdout_lines), b''.join(stderr_lines)
