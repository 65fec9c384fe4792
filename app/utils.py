# Imports
import logging
import streamlit as st
import pandas as pd
import geopandas as gpd
from pathlib import Path

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Constants
DATA_DIR = Path(__file__).resolve().parents[1] / "data" / "processed"
WARD_BOUNDARIES_FILE = DATA_DIR / "ward_boundaries.geojson"
NSSEC_COUNTS_FILE = DATA_DIR / "nssec_by_sex.csv"

BRITISH_NATIONAL_GRID = 27700
WGS84 = 4326

WARD_NAME_COL = "Name"
COUNCIL_COL = "Council"
TABLE_WARD_COL = "Ward"
TABLE_SEX_COL = "Sex"
AGGREGATE_NAME = "Scotland"

SEXES = ["Female", "Male", "All"]
CATEGORIES = [f"C{i}" for i in range(1, 9)]
CATEGORY_LABELS = {
    "C1": "Higher managerial, administrative and professional occupations",
    "C2": "Lower managerial, administrative and professional occupations",
    "C3": "Intermediate occupations",
    "C4": "Small employers and own account workers",
    "C5": "Lower supervisory and technical occupations",
    "C6": "Semi-routine occupations",
    "C7": "Routine occupations",
    "C8": "Never worked and long-term unemployed",
}


class DataUnavailable(Exception):
    """An input file is missing, unreadable or missing required columns."""


class InvalidGeometry(Exception):
    """A geometry is still invalid after validity repair."""


# Readers
def read_ward_boundaries(path=WARD_BOUNDARIES_FILE) -> gpd.GeoDataFrame:
    """Reads ward polygons. The file must carry a CRS and the Name/Council attributes."""
    path = Path(path)
    if not path.exists():
        raise DataUnavailable(f"Boundary file not found: {path}")
    try:
        gdf = gpd.read_file(path)
    except Exception as e:
        raise DataUnavailable(f"Could not read boundary file {path}: {e}") from e
    if gdf.crs is None:
        raise DataUnavailable(f"Boundary file {path} has no coordinate reference system")
    missing = [c for c in (WARD_NAME_COL, COUNCIL_COL) if c not in gdf.columns]
    if missing:
        raise DataUnavailable(f"Boundary file {path} is missing columns: {', '.join(missing)}")
    logger.info(f"Loaded {len(gdf)} ward boundaries from {path} ({gdf.crs.to_string()})")
    return gdf


def melt_counts(table: pd.DataFrame) -> pd.DataFrame:
    """
    Turns the census layout (one row per ward and sex, one column per category)
    into long rows of Ward, Category, Sex, Count.
    """
    long_df = table.melt(
        id_vars=[TABLE_WARD_COL, TABLE_SEX_COL],
        value_vars=CATEGORIES,
        var_name="Category",
        value_name="Count"
    )
    # Census tables print zero cells as "-"
    counts = long_df["Count"].replace("-", 0)
    counts = pd.to_numeric(counts, errors="coerce")
    long_df["Count"] = counts.where(counts >= 0)
    return long_df[[TABLE_WARD_COL, "Category", TABLE_SEX_COL, "Count"]]


def read_nssec_counts(path=NSSEC_COUNTS_FILE) -> pd.DataFrame:
    """Reads the NS-SeC by sex table and returns it in long form."""
    path = Path(path)
    if not path.exists():
        raise DataUnavailable(f"Census table not found: {path}")
    try:
        table = pd.read_csv(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataUnavailable(f"Could not parse census table {path}: {e}") from e
    except OSError as e:
        raise DataUnavailable(f"Could not read census table {path}: {e}") from e
    table.columns = table.columns.str.strip()
    missing = [c for c in [TABLE_WARD_COL, TABLE_SEX_COL] + CATEGORIES if c not in table.columns]
    if missing:
        raise DataUnavailable(f"Census table {path} is missing columns: {', '.join(missing)}")
    table[TABLE_WARD_COL] = table[TABLE_WARD_COL].astype(str).str.strip()
    table[TABLE_SEX_COL] = table[TABLE_SEX_COL].astype(str).str.strip()
    counts = melt_counts(table)
    logger.info(f"Loaded {len(table)} census rows ({counts[TABLE_WARD_COL].nunique()} areas) from {path}")
    return counts


# Cached Loaders
@st.cache_data(show_spinner="Loading ward boundaries...")
def load_ward_boundaries():
    return read_ward_boundaries(WARD_BOUNDARIES_FILE)


@st.cache_data(show_spinner="Loading census table...")
def load_nssec_counts():
    return read_nssec_counts(NSSEC_COUNTS_FILE)


def load_or_stop(loader):
    """Runs a loader on a slide and halts the page with an error message if the data is unavailable or unusable."""
    try:
        return loader()
    except (DataUnavailable, InvalidGeometry) as e:
        st.error(str(e))
        st.stop()
