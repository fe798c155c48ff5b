"""
Replay captured program output through logging.
"""

import logging
from typing import List, Optional

from pg_toolset_core.lib.defaults import BUFSIZE
from pg_toolset_core.lib.program import ProgramResult

logger = logging.getLogger(__name__)


def split_lines(text: Optional[str], max_lines: int = BUFSIZE) -> List[str]:
    """Split text into at most ``max_lines`` lines, extra lines are dropped."""
    if not text:
        return []
    return text.splitlines()[:max_lines]


def log_program_output(
    result: ProgramResult,
    out_level: int,
    err_level: int,
    max_lines: int = BUFSIZE,
    log: Optional[logging.Logger] = None
) -> None:
    """Log each line of stdout at ``out_level`` and of stderr at ``err_level``."""
    log = log or logger

    for line in split_lines(result.stdout, max_lines):
        log.log(out_level, "%s", line)

    for line in split_lines(result.stderr, max_lines):
        log.log(err_level, "%s", line)
