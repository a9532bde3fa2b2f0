"""Flat-file catalog of saved flow skeletons.

One line per flow: ``name,timestamp,tag_1,...,tag_n``. Only the name and the
ordered step tags are stored; a loaded flow always starts from default
values. Fields are not quoted, so a name containing a comma cannot be saved.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from flowmaker.pipeline.flows import Flow
from flowmaker.steps.steps import new_step
from flowmaker.utils.logging import get_logger


logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
SEPARATOR = ","


@dataclass
class CatalogEntry:
    name: str
    timestamp: str = ""
    tags: List[str] = field(default_factory=list)


def is_valid_flow_name(name: str) -> bool:
    """Names must be non-blank and must not break the line format."""
    if not name.strip():
        return False
    return not any(ch in name for ch in (SEPARATOR, "\n", "\r"))


def _split(line: str) -> List[str]:
    return line.rstrip("\r\n").split(SEPARATOR)


def _name_of(line: str) -> str:
    return _split(line)[0]


class Catalog:
    """Reads and rewrites the catalog file at *path*.

    Every method opens the file, uses it and closes it again. IO failures are
    logged and turned into empty results.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_lines(self) -> Optional[List[str]]:
        try:
            with open(self.path, encoding="utf-8", newline="") as fh:
                return [line for line in fh if line.strip("\r\n")]
        except FileNotFoundError:
            logger.info("catalog: %s does not exist yet", self.path)
            return []
        except OSError as exc:
            logger.error("catalog: unable to read %s: %s", self.path, exc)
            return None

    def save(self, flow: Flow, *, now: Optional[datetime] = None) -> bool:
        """Append *flow*'s skeleton; return False when nothing was written."""
        if not is_valid_flow_name(flow.name):
            logger.error("catalog: refusing to save flow with name %r", flow.name)
            return False
        timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
        line = SEPARATOR.join([flow.name, timestamp, *flow.kinds()])
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8", newline="") as fh:
                fh.write(line + "\n")
        except OSError as exc:
            logger.error("catalog: unable to append to %s: %s", self.path, exc)
            return False
        logger.info("catalog: saved flow %s (%d steps)", flow.name, len(flow))
        return True

    def names(self) -> List[str]:
        lines = self._read_lines() or []
        return [_name_of(line) for line in lines]

    def entries(self) -> List[CatalogEntry]:
        entries = []
        for line in self._read_lines() or []:
            fields = _split(line)
            name = fields[0]
            timestamp = fields[1] if len(fields) > 1 else ""
            tags = [tag for tag in fields[2:] if tag]
            entries.append(CatalogEntry(name, timestamp, tags))
        return entries

    def find(self, name: str) -> Optional[CatalogEntry]:
        for entry in self.entries():
            if entry.name == name:
                return entry
        return None

    def load(self, name: str) -> Flow:
        """Rebuild the first flow called *name*; empty Flow when not found."""
        flow = Flow(name)
        entry = self.find(name)
        if entry is None:
            logger.info("catalog: flow %s not found", name)
            return flow
        for tag in entry.tags:
            step = new_step(tag)
            if step is None:
                logger.warning("catalog: unknown step type '%s' skipped", tag)
                continue
            flow.add_step(step)
        logger.info("catalog: loaded flow %s (%d steps)", name, len(flow))
        return flow

    def delete(self, name: str) -> int:
        """Drop every line for *name*; return how many lines were removed.

        Kept lines are copied unchanged to a temporary file next to the
        catalog, which then replaces it in one step.
        """
        try:
            with open(self.path, encoding="utf-8", newline="") as src:
                lines = src.readlines()
        except OSError as exc:
            logger.error("catalog: unable to read %s: %s", self.path, exc)
            return 0

        kept = [line for line in lines if _name_of(line) != name]
        removed = len(lines) - len(kept)
        if not removed:
            logger.info("catalog: flow %s not found, nothing deleted", name)
            return 0

        directory = self.path.parent
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="",
                dir=directory,
                prefix=".flows-",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                tmp.writelines(kept)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.error("catalog: unable to rewrite %s: %s", self.path, exc)
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            return 0
        logger.info("catalog: deleted flow %s (%d lines)", name, removed)
        return removed
