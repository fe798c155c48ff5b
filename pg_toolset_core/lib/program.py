"""
Run external programs and capture their output.
"""

import codecs
import os
import selectors
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from pg_toolset_core.lib.defaults import BUFSIZE

ELLIPSIS = "..."
STDOUT = "stdout"
STDERR = "stderr"

ProcessBuffer = Callable[[str, str], None]


@dataclass(frozen=True)
class Program:
    """
    An external command to run.

    Attributes:
        args: Program path followed by its arguments
        setsid: Start the child as a new session leader
        env: Environment for the child, inherited when None
    """
    args: Tuple[str, ...]
    setsid: bool = True
    env: Optional[Mapping[str, str]] = None

    def __post_init__(self):
        if not self.args:
            raise ValueError("Program args must contain at least the program path")
        object.__setattr__(self, "args", tuple(str(a) for a in self.args))

    @property
    def path(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class ProgramResult:
    """
    Outcome of running a Program.

    ``return_code`` is None when the program could not be started, in which
    case ``error`` holds the operating system error number.
    """
    program: Program
    return_code: Optional[int] = None
    error: Optional[int] = None
    stdout: str = ""
    stderr: str = ""

    @property
    def launched(self) -> bool:
        return self.return_code is not None

    @property
    def ok(self) -> bool:
        return self.return_code == 0


@dataclass
class _OutputBuffers:
    chunks: Dict[str, list] = field(default_factory=lambda: {STDOUT: [], STDERR: []})

    def append(self, stream: str, text: str) -> None:
        self.chunks[stream].append(text)

    def text(self, stream: str) -> str:
        return "".join(self.chunks[stream])


def run_program(path: str, *args: str, setsid: bool = True, env: Optional[Mapping[str, str]] = None) -> ProgramResult:
    """Run ``path`` with ``args`` and wait for it to finish."""
    return execute_program(Program(args=(path,) + tuple(args), setsid=setsid, env=env))


def execute_program(program: Program, process_buffer: Optional[ProcessBuffer] = None) -> ProgramResult:
    """
    Start the program, stream its stdout and stderr and block until it exits.

    Every chunk read is appended to the result buffers and, when given, also
    passed to ``process_buffer(stream, text)`` with stream one of "stdout" or
    "stderr". A non-zero exit status is returned as data, not raised.
    """
    buffers = _OutputBuffers()
    env = dict(program.env) if program.env is not None else None

    try:
        proc = subprocess.Popen(
            list(program.args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=program.setsid,
            env=env,
        )
    except OSError as e:
        return ProgramResult(program=program, error=e.errno or 0)

    decoders = {
        STDOUT: codecs.getincrementaldecoder("utf-8")(errors="replace"),
        STDERR: codecs.getincrementaldecoder("utf-8")(errors="replace"),
    }

    def consume(stream: str, data: bytes, final: bool = False) -> None:
        text = decoders[stream].decode(data, final=final)
        if text:
            buffers.append(stream, text)
            if process_buffer is not None:
                process_buffer(stream, text)

    with proc, selectors.DefaultSelector() as selector:
        selector.register(proc.stdout, selectors.EVENT_READ, STDOUT)
        selector.register(proc.stderr, selectors.EVENT_READ, STDERR)

        while selector.get_map():
            for key, _ in selector.select():
                data = os.read(key.fd, BUFSIZE)
                if data:
                    consume(key.data, data)
                else:
                    consume(key.data, b"", final=True)
                    selector.unregister(key.fileobj)

        return_code = proc.wait()

    return ProgramResult(
        program=program,
        return_code=return_code,
        stdout=buffers.text(STDOUT),
        stderr=buffers.text(STDERR),
    )


def command_line(args: Sequence[str]) -> str:
    return " ".join(shlex.quote(arg) for arg in args)


def snprintf_program_command_line(program: Program, size: int = BUFSIZE) -> Tuple[str, int]:
    """
    Render the command line into at most ``size - 1`` characters.

    Returns the rendered text and the length the full command line would
    have, so that callers can tell when it was clipped.
    """
    full = command_line(program.args)
    return full[:max(size - 1, 0)], len(full)


def format_command_line(program: Program, size: int = BUFSIZE) -> str:
    """
    Command line for display, at most ``size - 1`` characters as with
    snprintf_program_command_line. A clipped line ends with an ellipsis.
    """
    if size <= len(ELLIPSIS) + 1:
        raise ValueError(f"size must be larger than {len(ELLIPSIS) + 1}")

    text, length = snprintf_program_command_line(program, size)

    if length >= size:
        return text[:size - 1 - len(ELLIPSIS)] + ELLIPSIS

    return text
