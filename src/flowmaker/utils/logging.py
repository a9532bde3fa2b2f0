from __future__ import annotations

import logging
from pathlib import Path

FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = "logs/flowmaker.log",
    console_level: str = "WARNING",
) -> None:
    """Send records to the log file and warnings to stderr.

    The console handler stays at *console_level* so that step progress does
    not interleave with the operator prompts. Does nothing when the root
    logger is already configured.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console.setLevel(getattr(logging, console_level.upper(), logging.WARNING))
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
