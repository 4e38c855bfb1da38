from __future__ import annotations

from pathlib import Path

import pandas as pd

_STORES_CSV = Path(__file__).resolve().parent.parent / "data" / "stores.csv"

_df: pd.DataFrame | None = None


def _load() -> pd.DataFrame:
    df = pd.read_csv(_STORES_CSV, dtype={"id": str})
    df["name"] = df["name"].fillna("")
    df["address"] = df["address"].fillna("")

    # Lowercase name for case-insensitive search
    df["name_lower"] = df["name"].str.lower()

    return df


def get_dataframe() -> pd.DataFrame:
    """Return the in-memory store catalogue, loading it on first call."""
    global _df
    if _df is None:
        _df = _load()
    return _df


def search_stores(search: str) -> list[dict[str, str]]:
    """Return stores whose name contains ``search``; empty matches all."""
    df = get_dataframe()
    needle = search.strip().lower()
    if needle:
        df = df[df["name_lower"].str.contains(needle, regex=False)]
    return df[["id", "name", "address"]].to_dict(orient="records")


def store_exists(store_id: str) -> bool:
    return bool((get_dataframe()["id"] == store_id).any())
