from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, Tuple, Union

import pandas as pd

from latency.errors import FileError, ParseError, SchemaError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("Model", "Time")


def file_signature(path: Union[str, Path]) -> Tuple[str, float]:
    p = Path(path)
    try:
        return str(p.resolve()), p.stat().st_mtime
    except OSError as exc:
        raise FileError(f"Cannot stat results file: {p}", path=p) from exc


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col]
            if isinstance(series, pd.DataFrame):
                series = series.iloc[:, 0]
            series = series.astype("string").str.strip()
            series = series.replace({"": pd.NA})
            df[col] = series
    return df


def check_field_counts(path: Path) -> None:
    """Raise ParseError on the first row whose field count differs from the header's."""
    try:
        with path.open(newline="", encoding="utf-8") as fh:
            reader = csv.reader(fh)
            width = None
            for row in reader:
                # pandas skips blank lines
                if not row or (len(row) == 1 and not row[0].strip()):
                    continue
                if width is None:
                    width = len(row)
                elif len(row) != width:
                    raise ParseError(
                        f"Malformed results file {path}: line {reader.line_num} has {len(row)} field(s), header has {width}",
                        path=path,
                    )
    except (PermissionError, IsADirectoryError) as exc:
        raise FileError(f"Cannot read results file: {path}", path=path) from exc
    except (csv.Error, UnicodeDecodeError) as exc:
        raise ParseError(f"Malformed results file {path}: {exc}", path=path) from exc


def load_results(path: Union[str, Path]) -> pd.DataFrame:
    """Read a benchmark results CSV into a DataFrame, one row per Record.

    Column names and row order are preserved. ``Model`` and ``Time`` come back
    with the pandas ``string`` dtype; blank cells are ``pd.NA``.
    """
    p = Path(path)
    if not p.exists():
        raise FileError(f"Results file not found: {p}", path=p)
    if not p.is_file():
        raise FileError(f"Results path is not a file: {p}", path=p)

    check_field_counts(p)
    try:
        df = pd.read_csv(p, index_col=False)
    except (PermissionError, IsADirectoryError) as exc:
        raise FileError(f"Cannot read results file: {p}", path=p) from exc
    except pd.errors.EmptyDataError as exc:
        raise ParseError(f"Results file is empty: {p}", path=p) from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise ParseError(f"Malformed results file {p}: {exc}", path=p) from exc

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaError(f"Results file {p} is missing column(s): {', '.join(missing)}", path=p)

    df = coerce_str_safe(df, REQUIRED_COLUMNS)
    logger.info("Loaded %d result rows from %s", len(df), p)
    return df
