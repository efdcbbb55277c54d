"""Categorical recoding for observation tables.

Raw codes (``"M"``, ``"F"``, ``"III"``) are parsed through enumerated types
with total parse functions. Codes the caller has explicitly excluded are
dropped and reported; any other unmapped code is an error.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Sequence

import pandas as pd

from fishbio.contracts import MissingCategory

__all__ = ['Sex', 'MaturityStage', 'ExclusionReport', 'recode']

logger = logging.getLogger(__name__)

_BLANK = "<blank>"


class Sex(str, Enum):
    """Sex of a sampled fish."""
    MALE = "M"
    FEMALE = "F"

    @property
    def label(self) -> str:
        return "Male" if self is Sex.MALE else "Female"

    @classmethod
    def parse(cls, code) -> "Sex":
        """Parse a raw code (``M``/``F``/``Male``/``Female``, any case)."""
        text = str(code).strip().upper()
        for member in cls:
            if text in (member.value, member.label.upper()):
                return member
        raise ValueError(code)

    @classmethod
    def labels(cls) -> list[str]:
        return [member.label for member in cls]


class MaturityStage(str, Enum):
    """Ordinal gonadal maturity stage, I (immature) to V (spent)."""
    I = "I"
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"

    @property
    def rank(self) -> int:
        return list(MaturityStage).index(self) + 1

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, code) -> "MaturityStage":
        """Parse roman (``"III"``) or arabic (``3``, ``"3.0"``) stage codes."""
        text = str(code).strip().upper()
        try:
            return cls(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise ValueError(code) from None
        members = list(cls)
        if number.is_integer() and 1 <= number <= len(members):
            return members[int(number) - 1]
        raise ValueError(code)

    @classmethod
    def labels(cls) -> list[str]:
        return [member.label for member in cls]


@dataclass
class ExclusionReport:
    """Rows dropped by recoding, per raw code."""
    column: str
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


def recode(
    df: pd.DataFrame,
    column: str,
    parse: Callable[[object], Enum],
    excluded: Iterable[str] = (),
    order: Sequence[str] = None,
) -> tuple[pd.DataFrame, ExclusionReport]:
    """Recode a raw categorical column to display labels.

    Parameters
    ----------
    df : pd.DataFrame
        Observation table (not modified).
    column : str
        Column holding raw codes.
    parse : callable
        Total parse function returning an enum member with a ``label``;
        raises ValueError for unknown codes.
    excluded : iterable of str
        Raw codes to drop before analysis (e.g. ``{"U"}`` for sex). Matched
        without regard to case; the report counts them upper-cased.
    order : sequence of str, optional
        Category order of the labels. Defaults to the enum's order.

    Returns
    -------
    (pd.DataFrame, ExclusionReport)
        New frame with ``column`` as an ordered Categorical of labels, and
        the per-code counts of dropped rows.

    Raises
    ------
    MissingCategory
        If a code is neither parseable nor excluded.
    """
    excluded = {str(code).strip().upper() for code in excluded}
    raw = df[column]
    blank = raw.isna() | (raw.astype(str).str.strip() == "")
    codes = raw.astype(str).str.strip()
    folded = codes.str.upper()

    drop = blank | folded.isin(excluded)
    report = ExclusionReport(column=column)
    if blank.any():
        report.counts[_BLANK] = int(blank.sum())
    for code, n in folded[drop & ~blank].value_counts().sort_index().items():
        report.counts[str(code)] = int(n)

    kept = df.loc[~drop].copy()
    labels = {}
    unmapped = set()
    for code in pd.unique(codes[~drop]):
        try:
            labels[code] = parse(code).label
        except ValueError:
            unmapped.add(code)
    if unmapped:
        raise MissingCategory(column, unmapped)

    if order is None:
        order = _enum_labels(parse)
    kept[column] = pd.Categorical(
        codes[~drop].map(labels), categories=list(order), ordered=True
    )

    if report.total:
        logger.info(
            "Excluded %d rows from '%s': %s", report.total, column,
            ", ".join(f"{code}={n}" for code, n in report.counts.items())
        )
    return kept, report


def _enum_labels(parse) -> list[str]:
    """Labels of the enum that owns ``parse``."""
    owner = getattr(parse, "__self__", None)
    if owner is None or not hasattr(owner, "labels"):
        raise TypeError("parse must be a classmethod of an enum with labels()")
    return owner.labels()
