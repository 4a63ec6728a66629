"""Subject catalog import from delimited text with a header row.

Header matching is a fixed, ordered table of accepted spellings per logical
column; comparisons are case-insensitive and the first spelling present in
the header wins.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Dict, IO, List, Sequence

from ..errors import CatalogImportError
from ..models.subject import Subject

HEADER_ALIASES: Dict[str, Sequence[str]] = {
    "code": ("codigo", "código", "codi", "codi upc", "code", "id"),
    "label": ("siglas", "sigles", "label", "short", "acronym"),
    "level": ("nivel", "nivell", "level"),
}


def resolve_columns(header: Sequence[str]) -> Dict[str, str | None]:
    normalized = {h.strip().lower(): h for h in header if h is not None}
    out: Dict[str, str | None] = {}
    for field, spellings in HEADER_ALIASES.items():
        out[field] = next((normalized[s] for s in spellings if s in normalized), None)
    return out


def _sniff_dialect(sample: str):
    try:
        return csv.Sniffer().sniff(sample, delimiters=",;\t")
    except csv.Error:
        return csv.excel


def parse_catalog(f: IO[str]) -> List[Subject]:
    """Parse catalog rows. Raises CatalogImportError when no row is usable."""
    text = f.read()
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise CatalogImportError("Catalog file is empty")
    reader = csv.DictReader(io.StringIO(text), dialect=_sniff_dialect(text[:4096]))
    cols = resolve_columns(reader.fieldnames or [])
    if cols["code"] is None and cols["label"] is None:
        raise CatalogImportError(
            f"No code or label column in header {reader.fieldnames!r}"
        )

    def cell(row: Dict[str, str], field: str) -> str:
        col = cols[field]
        return (row.get(col) or "").strip() if col else ""

    out: List[Subject] = []
    for row in reader:
        code = cell(row, "code")
        label = cell(row, "label")
        if not code and not label:
            continue
        out.append(Subject(id=code or label, code=code, label=label, level=cell(row, "level")))
    if not out:
        raise CatalogImportError("Catalog has no valid rows")
    logging.getLogger(__name__).info(f"Parsed {len(out)} catalog rows")
    return out


def load_catalog(path: Path) -> List[Subject]:
    with path.open("r", encoding="utf-8", newline="") as f:
        return parse_catalog(f)
