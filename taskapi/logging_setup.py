import logging
import sys
from pathlib import Path
from typing import Optional, Union


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep taskapi and uvicorn logs; only let other libraries through at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("taskapi") or name.startswith("uvicorn"):
            return True
        if name == "py.warnings":
            return record.levelno >= logging.ERROR
        return record.levelno >= logging.WARNING


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure root logging with a console handler and an optional file handler.

    Safe to call more than once: existing root handlers are replaced.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(ch)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
