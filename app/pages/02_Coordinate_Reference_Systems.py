# Imports
import streamlit as st
import numpy as np
import pandas as pd
from licensing import generate_attribution_markdown
from spatial import report_crs, reproject, repair_geometries
from utils import load_ward_boundaries, load_or_stop, BRITISH_NATIONAL_GRID, WGS84, WARD_NAME_COL

# Page Config
st.set_page_config(
    page_title="Coordinate Reference Systems - Gender Gaps",
    layout="wide"
)

st.title("2. Coordinate Reference Systems")
st.markdown(
    """
    Coordinates only mean something once we know their **coordinate reference system (CRS)**.
    CRSs are usually referred to by an **EPSG code**:

    * **EPSG:27700** British National Grid. Projected, in metres. Good for areas and distances in Great Britain.
    * **EPSG:4326** WGS84 longitude/latitude in degrees. What web maps expect.
    """
)

wards = load_or_stop(lambda: repair_geometries(load_ward_boundaries()))

# Reading the CRS
st.subheader("What CRS are we in?")
with st.echo():
    current = report_crs(wards)
st.metric("Current EPSG code", current)
if current != BRITISH_NATIONAL_GRID:
    st.warning(f"Expected the boundary file in EPSG:{BRITISH_NATIONAL_GRID}, found EPSG:{current}.")

st.markdown("---")

# Reprojecting
st.subheader("Reprojecting")
st.markdown(
    "`to_crs` computes new coordinates for every vertex. The result is a **new** table; "
    "the attributes and row order are untouched, only the numbers in the geometry change."
)
with st.echo():
    wards_wgs84 = reproject(wards, WGS84)

col1, col2 = st.columns(2)
with col1:
    st.markdown(f"**EPSG:{report_crs(wards)}** bounds (metres)")
    st.dataframe(pd.DataFrame([wards.total_bounds], columns=["minx", "miny", "maxx", "maxy"]).round(0),
                 hide_index=True)
with col2:
    st.markdown(f"**EPSG:{report_crs(wards_wgs84)}** bounds (degrees)")
    st.dataframe(pd.DataFrame([wards_wgs84.total_bounds], columns=["minx", "miny", "maxx", "maxy"]).round(4),
                 hide_index=True)

st.caption(
    f"Attributes unchanged: {wards[WARD_NAME_COL].equals(wards_wgs84[WARD_NAME_COL])}, "
    f"the original frame is still in EPSG:{report_crs(wards)}."
)

st.markdown("---")

# Round trip
st.subheader("Reprojecting to the CRS you are already in changes nothing")
with st.echo():
    same = reproject(wards, report_crs(wards))
    round_trip = reproject(wards_wgs84, BRITISH_NATIONAL_GRID)

drift = np.abs(np.asarray(round_trip.total_bounds) - np.asarray(wards.total_bounds)).max()
col1, col2 = st.columns(2)
with col1:
    st.metric("Identical after same-CRS reprojection", str(bool(same.geom_equals(wards).all())))
with col2:
    st.metric("Round trip 27700 → 4326 → 27700 drift", f"{drift:.6f} m")

st.markdown("---")
with st.container(border=True):
    st.page_link("pages/03_Census_Data.py", label="Next: Census Data", icon="➡️")

# Footer for Sourcing and Licensing
with st.expander("Sources & Licensing", expanded=False):
    st.markdown(generate_attribution_markdown())
