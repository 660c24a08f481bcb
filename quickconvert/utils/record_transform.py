"""
Flatten and unflatten utilities for tabular <-> hierarchical conversions.

A record maps string keys to scalars, nested records, or sequences. Its flat
form keys every leaf by the dotted path of its ancestors, so
``{"meta": {"age": 30}}`` flattens to ``{"meta.age": 30}``.
"""

import logging
from enum import Enum
from typing import Any, List, Optional

from ..models import FlatRecord, Record

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "."


class ValueKind(Enum):
    """Tag for the three shapes a record value can take."""
    SCALAR = "scalar"
    NESTED = "nested"
    SEQUENCE = "sequence"


def value_kind(value: Any) -> ValueKind:
    """Classify a record value."""
    if isinstance(value, dict):
        return ValueKind.NESTED
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


def flatten(record: Record, prefix: str = "") -> FlatRecord:
    """
    Flatten a nested record into dotted-path keys.

    Keys are visited in insertion order. Sequences and scalars are copied
    through unchanged; an empty nested record is kept as a ``{}`` leaf so that
    it survives a round trip.

    Args:
        record: Record to flatten
        prefix: Dotted path of the record's parent, if any

    Returns:
        Flat record with one key per leaf
    """
    flat: FlatRecord = {}

    for key, value in record.items():
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else str(key)

        if value_kind(value) is ValueKind.NESTED and value:
            flat.update(flatten(value, path))
        elif value_kind(value) is ValueKind.NESTED:
            flat[path] = {}
        else:
            flat[path] = value

    return flat


def unflatten(flat_record: FlatRecord, conflicts: Optional[List[str]] = None) -> Record:
    """
    Rebuild a nested record from dotted-path keys.

    Collisions resolve last-write-wins in key order: a leaf standing where a
    nested record is needed is replaced by a new record, and a nested record
    standing where a leaf is assigned is replaced by the leaf. Each collision
    is logged and its path appended to ``conflicts`` when a list is given.

    Args:
        flat_record: Mapping of dotted paths to leaf values
        conflicts: Optional list collecting the overwritten paths

    Returns:
        Nested record
    """
    result: Record = {}
    # ids of the records built here; nested values taken from the input are
    # copied before anything is written into them
    owned = {id(result)}

    for key, value in flat_record.items():
        segments = str(key).split(PATH_SEPARATOR)
        current = result

        for depth, segment in enumerate(segments[:-1]):
            existing = current.get(segment)
            if value_kind(existing) is not ValueKind.NESTED:
                if segment in current:
                    _report_conflict(PATH_SEPARATOR.join(segments[:depth + 1]), key, conflicts)
                current[segment] = {}
                owned.add(id(current[segment]))
            elif id(existing) not in owned:
                current[segment] = dict(existing)
                owned.add(id(current[segment]))
            current = current[segment]

        leaf = segments[-1]
        if value_kind(current.get(leaf)) is ValueKind.NESTED and current[leaf]:
            _report_conflict(key, key, conflicts)
        current[leaf] = value

    return result


def _report_conflict(path: str, key: str, conflicts: Optional[List[str]]) -> None:
    logger.warning(f"Key '{key}' overwrote existing value at '{path}' (last write wins)")
    if conflicts is not None:
        conflicts.append(path)
