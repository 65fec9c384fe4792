import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import geopandas as gpd
import pytest
from shapely.geometry import box

from utils import CATEGORIES


def make_counts(records, aggregate=True):
    """
    Long count rows from {ward: {category: (female, male, all)}}.
    Categories not listed for a ward get no rows at all.
    """
    rows = []
    for ward, by_category in records.items():
        for category, (female, male, total) in by_category.items():
            for sex, count in zip(("Female", "Male", "All"), (female, male, total)):
                rows.append({"Ward": ward, "Category": category, "Sex": sex, "Count": count})
    if aggregate:
        for category in CATEGORIES:
            for sex in ("Female", "Male", "All"):
                rows.append({"Ward": "Scotland", "Category": category, "Sex": sex, "Count": 1000})
    return pd.DataFrame(rows)


@pytest.fixture
def counts_ab():
    return make_counts({
        "A": {"C1": (2, 8, 10)},
        "B": {"C1": (5, 5, 10)},
    })


@pytest.fixture
def square_wards():
    # Three 1 km squares side by side near Edinburgh, British National Grid
    return gpd.GeoDataFrame(
        {"Name": ["A", "B", "C"], "Council": ["City of Edinburgh", "City of Edinburgh", "Midlothian"]},
        geometry=[
            box(325000, 673000, 326000, 674000),
            box(326000, 673000, 327000, 674000),
            box(327000, 673000, 328000, 674000),
        ],
        crs=27700
    )


@pytest.fixture
def scores_ab():
    return pd.DataFrame({"Ward": ["A", "B"], "gap_C1": [25.0, 100.0]})


@pytest.fixture
def joined_squares(square_wards):
    joined = square_wards.copy()
    joined["gap_C1"] = [25.0, 100.0, np.nan]
    return joined


@pytest.fixture
def census_table_csv(tmp_path):
    lines = ["Ward,Sex," + ",".join(CATEGORIES)]
    for ward in ("A", "B"):
        lines.append(f"{ward},Female," + ",".join(["5"] * 8))
        lines.append(f"{ward},Male," + ",".join(["5"] * 7 + ["-"]))
        lines.append(f"{ward},All," + ",".join(["10"] * 8))
    lines.append("Scotland,Female," + ",".join(["50"] * 8))
    lines.append("Scotland,Male," + ",".join(["50"] * 8))
    lines.append("Scotland,All," + ",".join(["100"] * 8))
    path = tmp_path / "nssec.csv"
    path.write_text("\n".join(lines) + "\n")
    return path
