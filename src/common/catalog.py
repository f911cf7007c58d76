# ABOUTME: Converts tabular past-paper data into ordered CatalogItem sequences.
# ABOUTME: Supports csv, json, and parquet sources so any export can feed the recommender.

from __future__ import annotations

from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from .schemas import CatalogItem

REQUIRED_COLUMNS = ("item_id", "subject", "difficulty")


def load_catalog(path: Path) -> List[CatalogItem]:
    """Read a catalog file and return items in file order."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path, dtype={"item_id": str})
    elif suffix == ".json":
        df = pd.read_json(path, dtype={"item_id": str})
    elif suffix == ".parquet":
        df = pd.read_parquet(path)
    else:
        raise ValueError(f"Unsupported catalog format '{suffix}'. Expected one of: .csv, .json, .parquet.")
    return catalog_from_frame(df)


def catalog_from_frame(df: pd.DataFrame) -> List[CatalogItem]:
    """Convert a catalog DataFrame to CatalogItem records, preserving row order."""
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Catalog is missing required columns: {', '.join(missing)}")

    items = []
    for _, row in df.iterrows():
        items.append(
            CatalogItem(
                item_id=str(row["item_id"]),
                subject=str(row["subject"]),
                difficulty=str(row["difficulty"]).strip().lower(),
                tags=_normalize_tags(row.get("tags")),
                download_count=_as_int(row.get("download_count"), 0),
                year=_as_int(row.get("year"), 0),
                has_ai_tutor=_as_bool(row.get("has_ai_tutor")),
                title=_as_str(row.get("title")),
            )
        )
    return items


def _normalize_tags(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, (list, tuple, np.ndarray)):
        return tuple(str(v).strip() for v in value if v is not None and str(v).strip())
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(";") if part.strip())
    # NaN from an empty csv cell
    return ()


def _as_int(value, default: int) -> int:
    if value is None or pd.isna(value):
        return default
    return int(value)


def _as_bool(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "y"}
    if pd.isna(value):
        return False
    return bool(value)


def _as_str(value) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value)
