"""
Element-set text ingestion.

Input is newline-delimited groups of three lines:
    name
    1 NNNNNC ...   (line 1)
    2 NNNNN ...    (line 2)

Grouping is positional, as CelesTrak serves it. A trailing group that is
missing line 1 or line 2 is dropped. Groups whose line markers are wrong
raise ParseError when parsed on their own and are skipped (and counted)
when parsed in a batch. Field-level validation (checksums, numbers) is left
to the propagator so one bad element never takes down the batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from skytracker.models.element_set import OrbitalElementSet

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Malformed element-set group."""

    def __init__(self, message: str, index: Optional[int] = None, name: str = ""):
        super().__init__(message)
        self.index = index
        self.name = name


@dataclass
class ParseReport:
    element_sets: List[OrbitalElementSet] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)
    incomplete_lines: int = 0

    @property
    def dropped(self) -> int:
        return len(self.errors)


def _clean_lines(text: str) -> List[str]:
    return [l.rstrip() for l in (text or "").splitlines() if l.strip()]


def parse_element_set(name: str, line1: str, line2: str, index: Optional[int] = None) -> OrbitalElementSet:
    name = (name or "").strip()
    line1 = (line1 or "").strip()
    line2 = (line2 or "").strip()

    if not line1.startswith("1 "):
        raise ParseError(f"line 1 of {name!r} does not start with '1 '", index=index, name=name)
    if not line2.startswith("2 "):
        raise ParseError(f"line 2 of {name!r} does not start with '2 '", index=index, name=name)

    return OrbitalElementSet(name=name, line1=line1, line2=line2)


def iter_element_sets(text: str, report: Optional[ParseReport] = None) -> Iterator[OrbitalElementSet]:
    """
    Yield element sets in source order. Duplicate names are kept.
    Bad groups are logged and recorded in `report` when one is given.
    """
    lines = _clean_lines(text)
    n_full = len(lines) - len(lines) % 3

    for group, i in enumerate(range(0, n_full, 3)):
        try:
            yield parse_element_set(lines[i], lines[i + 1], lines[i + 2], index=group)
        except ParseError as e:
            logger.warning("Dropping element-set group %d: %s", group, e)
            if report is not None:
                report.errors.append(e)

    leftover = len(lines) - n_full
    if leftover:
        logger.warning("Dropping incomplete trailing group (%d line(s))", leftover)
        if report is not None:
            report.incomplete_lines = leftover


def parse_element_sets(text: str) -> ParseReport:
    report = ParseReport()
    report.element_sets = list(iter_element_sets(text, report))
    logger.info(
        "Parsed %d element set(s), dropped %d malformed group(s)",
        len(report.element_sets), report.dropped,
    )
    return report


def parse(text: str) -> Sequence[OrbitalElementSet]:
    return parse_element_sets(text).element_sets
