# Imports
import logging
import numpy as np
import pandas as pd
from utils import AGGREGATE_NAME, CATEGORIES, SEXES, TABLE_WARD_COL, TABLE_SEX_COL

logger = logging.getLogger(__name__)

PARITY = 100.0
PARITY_TOLERANCE = 1e-9


def gap_column(category):
    return f"gap_{category}"


GAP_COLUMNS = [gap_column(c) for c in CATEGORIES]


def exclude_aggregate(counts: pd.DataFrame, sentinel=AGGREGATE_NAME) -> pd.DataFrame:
    """Drops the national aggregate rows."""
    return counts[counts[TABLE_WARD_COL] != sentinel].copy()


def to_wide(counts: pd.DataFrame) -> pd.DataFrame:
    """
    Reshapes long counts into one row per ward with a column per
    (category, sex) pair, e.g. C1_Female, C1_Male, C1_All.
    Pairs absent from the input become null columns.
    """
    grouped = counts.groupby([TABLE_WARD_COL, "Category", TABLE_SEX_COL])["Count"].sum(min_count=1)
    wide = grouped.unstack(["Category", TABLE_SEX_COL])
    wide.columns = [f"{category}_{sex}" for category, sex in wide.columns]
    expected = [f"{c}_{s}" for c in CATEGORIES for s in SEXES]
    wide = wide.reindex(columns=expected)
    return wide.reset_index()


def _as_float(values):
    return pd.to_numeric(pd.Series(values), errors="coerce").astype(float)


def equality_score(female, male, total) -> pd.Series:
    """
    Female count relative to male count, scaled so that 100 is parity.
    Null where male or total is zero or missing.
    """
    female, male, total = _as_float(female), _as_float(male), _as_float(total)
    defined = (male > 0) & (total > 0) & female.notna()
    score = pd.Series(np.nan, index=female.index)
    score[defined] = female[defined] / male[defined] * 100
    return score


def ratio_of_ratios_score(female, male, total) -> pd.Series:
    """
    (female / total) / (male / total) * 100, the case study's original form.
    The shared denominator cancels, so this agrees with equality_score.
    """
    female, male, total = _as_float(female), _as_float(male), _as_float(total)
    defined = (male > 0) & (total > 0) & female.notna()
    score = pd.Series(np.nan, index=female.index)
    female_share = female[defined] / total[defined]
    male_share = male[defined] / total[defined]
    score[defined] = female_share / male_share * 100
    return score


def _category_columns(wide, category):
    return (wide[f"{category}_Female"], wide[f"{category}_Male"], wide[f"{category}_All"])


def scores_from_wide(wide: pd.DataFrame) -> pd.DataFrame:
    scores = pd.DataFrame({TABLE_WARD_COL: wide[TABLE_WARD_COL]})
    for category in CATEGORIES:
        female, male, total = _category_columns(wide, category)
        scores[gap_column(category)] = equality_score(female, male, total).values
    return scores


def calculate_equality_scores(counts: pd.DataFrame, sentinel=AGGREGATE_NAME) -> pd.DataFrame:
    """Full calculator: drop the aggregate, reshape, score every category."""
    ward_counts = exclude_aggregate(counts, sentinel)
    wide = to_wide(ward_counts)
    scores = scores_from_wide(wide)
    undefined = count_undefined_scores(scores)
    if undefined.sum():
        logger.warning(
            f"Equality score undefined for {int(undefined.sum())} ward/category cells: "
            f"{undefined[undefined > 0].to_dict()}"
        )
    logger.info(f"Calculated equality scores for {len(scores)} wards")
    return scores


def count_undefined_scores(scores: pd.DataFrame) -> pd.Series:
    return scores[GAP_COLUMNS].isna().sum()


def formula_discrepancy(wide: pd.DataFrame) -> float:
    """Largest absolute difference between the two score formulas, over cells where both are defined."""
    worst = 0.0
    for category in CATEGORIES:
        female, male, total = _category_columns(wide, category)
        simple = equality_score(female, male, total)
        original = ratio_of_ratios_score(female, male, total)
        diff = (simple - original).abs().dropna()
        if not diff.empty:
            worst = max(worst, float(diff.max()))
    return worst


def interpret_score(value):
    if value is None or pd.isna(value):
        return "undefined"
    if abs(value - PARITY) <= PARITY_TOLERANCE:
        return "parity"
    return "female over-represented" if value > PARITY else "male over-represented"


def long_scores(scores: pd.DataFrame) -> pd.DataFrame:
    """Tidy (Ward, Category, gap) rows for charting."""
    tidy = scores.melt(id_vars=[TABLE_WARD_COL], value_vars=GAP_COLUMNS, var_name="Category", value_name="gap")
    tidy["Category"] = tidy["Category"].str.replace("gap_", "", regex=False)
    return tidy
