"""
Tabular <-> hierarchical conversions (CSV to JSON and JSON to CSV).

CSV rows are read with pandas as plain strings, typed cell by cell, and
unflattened on dotted headers. JSON records are flattened on the way back.
"""

import csv
import json
import logging
import re
from io import StringIO
from typing import Any, Dict, List, Tuple

import pandas as pd

from ..models import FlatRecord, Record
from ..utils.error_handling import MalformedInputError
from ..utils.record_transform import ValueKind, flatten, unflatten, value_kind

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
TRUE_VALUES = {"true", "TRUE", "True"}
FALSE_VALUES = {"false", "FALSE", "False"}

# Beyond this, floats lose integer precision; such values stay strings
MAX_SAFE_INTEGER = 2 ** 53 - 1

# Delimiters tried when sniffing delimited text, and the sample size
DELIMITER_CANDIDATES = ",\t|;"
SNIFF_LINES = 20


def infer_scalar(value: Any) -> Any:
    """
    Best-effort typing of a delimited-text cell.

    Numeric-looking values become int or float, true/false become booleans,
    empty cells become None, and everything else is returned unchanged.
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if value == "":
        return None
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False

    if NUMBER_PATTERN.match(value):
        number = float(value)
        if abs(number) > MAX_SAFE_INTEGER:
            return value
        if number.is_integer():
            return int(number)
        return number

    return value


def _unique_headers(raw_headers: List[Any]) -> List[str]:
    """Trim header names and suffix duplicates as name_1, name_2, ..."""
    headers: List[str] = []
    seen: Dict[str, int] = {}

    for raw in raw_headers:
        name = "" if raw is None or (not isinstance(raw, str) and pd.isna(raw)) else str(raw).strip()
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        seen.setdefault(name, 0)
        headers.append(name)

    return headers


def detect_delimiter(text: str) -> str:
    """
    Guess the field delimiter among comma, tab, pipe and semicolon.

    Only the first lines are sampled. Falls back to a comma when the sample
    is ambiguous, e.g. a single-column file.
    """
    sample = "\n".join(text.splitlines()[:SNIFF_LINES])
    try:
        delimiter = csv.Sniffer().sniff(sample, delimiters=DELIMITER_CANDIDATES).delimiter
    except csv.Error:
        return ","
    logger.debug(f"Detected CSV delimiter {delimiter!r}")
    return delimiter


def read_csv_rows(text: str, infer_types: bool = True) -> Tuple[List[str], List[FlatRecord]]:
    """
    Parse delimited text into header names and flat row records.

    Args:
        text: Delimited text with a header row (comma, tab, pipe or semicolon)
        infer_types: Type cells with infer_scalar() instead of keeping strings

    Returns:
        Tuple of (fields, rows)

    Raises:
        MalformedInputError: If the text cannot be tokenized
    """
    try:
        df = pd.read_csv(
            StringIO(text),
            sep=detect_delimiter(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        return [], []
    except pd.errors.ParserError as e:
        raise MalformedInputError(f"Invalid CSV: {e}")

    if df.empty:
        return [], []

    fields = _unique_headers(list(df.iloc[0]))

    rows: List[FlatRecord] = []
    for values in df.iloc[1:].itertuples(index=False, name=None):
        if infer_types:
            row = {field: infer_scalar(value) for field, value in zip(fields, values)}
        else:
            row = {field: ("" if pd.isna(value) else value) for field, value in zip(fields, values)}
        rows.append(row)

    return fields, rows


def csv_to_json(file_content: bytes, filename: str, infer_types: bool = True) -> str:
    """
    Convert CSV content into a JSON envelope of nested records.

    Returns:
        JSON text: {"meta": {filename, rows, fields[, conflicts]}, "data": [...]}
    """
    text = file_content.decode("utf-8-sig", errors="replace")
    fields, rows = read_csv_rows(text, infer_types=infer_types)

    conflicts: List[str] = []
    data = [unflatten(row, conflicts) for row in rows]

    meta: Dict[str, Any] = {
        "filename": filename,
        "rows": len(data),
        "fields": fields,
    }
    if conflicts:
        meta["conflicts"] = sorted(set(conflicts))

    logger.info(f"CSV to JSON: {len(data)} rows, {len(fields)} fields")
    return json.dumps({"meta": meta, "data": data}, indent=2, ensure_ascii=False)


def load_records(file_content: bytes) -> List[Record]:
    """
    Parse JSON content into a list of records.

    A single object is wrapped as a one-element list.

    Raises:
        MalformedInputError: If the content is not an object or array of objects
    """
    try:
        parsed = json.loads(file_content.decode("utf-8-sig", errors="replace"))
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid JSON: {e}", details={"position": e.pos})

    if isinstance(parsed, dict):
        return [parsed]
    if isinstance(parsed, list) and all(isinstance(item, dict) for item in parsed):
        return parsed

    raise MalformedInputError("JSON must be an object or array of objects")


def render_cell(value: Any) -> str:
    """Render a flattened leaf as CSV cell text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value_kind(value) is not ValueKind.SCALAR:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def json_to_csv(file_content: bytes) -> str:
    """
    Convert JSON records into CSV with dotted-path columns.

    The header is the union of flattened keys in first-seen order; records
    missing a column get an empty cell.
    """
    records = load_records(file_content)
    flat_rows = [flatten(record) for record in records]

    # dict keys keep first-seen order
    columns: Dict[str, None] = {}
    for row in flat_rows:
        columns.update(dict.fromkeys(row))

    if not flat_rows or not columns:
        return ""

    rendered = [{key: render_cell(value) for key, value in row.items()} for row in flat_rows]
    df = pd.DataFrame(rendered, columns=list(columns), dtype=object)
    df = df.fillna('')

    logger.info(f"JSON to CSV: {len(df)} rows, {len(columns)} columns")
    return df.to_csv(index=False, lineterminator="\n")
