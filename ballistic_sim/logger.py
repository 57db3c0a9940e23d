"""Library logger with optional file output.

Warnings (abandoned trajectories, unreachable zeros) reach the console through
the ``ballistic_sim`` logger at INFO level. Per-run traces of ``simulate`` and
of the zeroing bracket are DEBUG records; send them to a file with

    from ballistic_sim.logger import enable_file_logging, disable_file_logging

    enable_file_logging("trajectory.log")
    ...
    disable_file_logging()
"""
import logging
from typing import Optional, Union

__all__ = ('logger',
           'set_console_level',
           'enable_file_logging',
           'disable_file_logging',
)

Level = Union[int, str]

console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
console_handler.setLevel(logging.DEBUG)

logger: logging.Logger = logging.getLogger('ballistic_sim')
logger.addHandler(console_handler)
logger.setLevel(logging.INFO)

file_handler: Optional[logging.FileHandler] = None


def set_console_level(level: Level) -> None:
    """Filter console output without touching the logger or the log file."""
    console_handler.setLevel(level)


def enable_file_logging(filename: str = "ballistic_sim.log",
                        level: Level = logging.DEBUG) -> None:
    """Append records at ``level`` and above to ``filename``.

    The logger itself is lowered to ``level`` if needed so the records are
    produced at all, and the console filter is raised to the old level so
    it shows no more than before. An already active file handler is closed
    and replaced.
    """
    global file_handler
    if file_handler is not None:
        disable_file_logging()

    file_handler = logging.FileHandler(filename)
    file_handler.setLevel(level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s:%(levelname)s:%(module)s:%(message)s"))
    logger.addHandler(file_handler)
    previous = logger.getEffectiveLevel()
    if previous > file_handler.level:
        console_handler.setLevel(max(console_handler.level, previous))
        logger.setLevel(file_handler.level)


def disable_file_logging() -> None:
    """Remove and close the file handler, if any. Safe to call repeatedly."""
    global file_handler
    if file_handler is not None:
        logger.removeHandler(file_handler)
        file_handler.close()
        file_handler = None
