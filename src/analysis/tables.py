"""Tables — pandas views of engine output for printing and export."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import pandas as pd

from src.binding_engine.models import Finger, ScoredKey


def scored_keys_frame(scored_keys: Iterable[ScoredKey], top: int | None = None) -> pd.DataFrame:
    """Scored keys, most accessible first (stable on ties)."""
    rows = [
        {
            "Key": sk.code,
            "Score": round(sk.total_score, 2),
            "Finger": sk.best_finger.value,
            "Origin": sk.origin_key,
            "Resting": sk.is_resting_key,
            "Movement": sk.is_movement,
        }
        for sk in scored_keys
    ]
    df = pd.DataFrame(rows, columns=["Key", "Score", "Finger", "Origin", "Resting", "Movement"])
    df = df.sort_values("Score", kind="stable").reset_index(drop=True)
    if top is not None:
        df = df.head(top)
    return df


def bindings_frame(report: Mapping[str, Any], frequencies: Mapping[str, float]) -> pd.DataFrame:
    """One row per binding in a pipeline report."""
    rows = [
        {
            "Action": row["action"],
            "Key": row["key"],
            "Finger": row["finger"] or "unknown",
            "Key score": row["key_score"],
            "Frequency": frequencies.get(row["action"]),
        }
        for row in report["bindings"]
    ]
    return pd.DataFrame(rows, columns=["Action", "Key", "Finger", "Key score", "Frequency"])


def finger_load_frame(loads: Mapping[Finger, float]) -> pd.DataFrame:
    """Finger loads in the fixed finger order, zero for idle fingers."""
    return pd.DataFrame(
        {"Finger": [f.value for f in Finger], "Load": [loads.get(f, 0.0) for f in Finger]}
    )
