# Imports
import streamlit as st
import matplotlib.pyplot as plt
from licensing import generate_attribution_markdown
from spatial import repair_geometries
from utils import load_ward_boundaries, load_or_stop, InvalidGeometry, WARD_NAME_COL, COUNCIL_COL

# Page Config
st.set_page_config(
    page_title="Simple Features - Gender Gaps",
    layout="wide"
)

st.title("1. Simple Features")
st.markdown(
    """
    A **simple feature** is a real-world object stored as a **geometry** (point, line or polygon)
    together with its **attributes**. In geopandas a collection of simple features is a
    `GeoDataFrame`: an ordinary pandas table with one special `geometry` column.
    """
)

# Load
st.subheader("Reading a boundary file")
with st.echo():
    wards = load_or_stop(load_ward_boundaries)

col_table, col_plot = st.columns([1, 1])
with col_table:
    st.code(wards.crs.to_string())
    st.dataframe(wards.drop(columns="geometry").assign(geometry=wards.geometry.geom_type), hide_index=True)
    st.caption(f"{len(wards)} wards, geometry types: {', '.join(sorted(wards.geom_type.unique()))}")
with col_plot:
    fig, ax = plt.subplots(figsize=(6, 5))
    wards.plot(column=COUNCIL_COL, legend=True, edgecolor="white", ax=ax)
    ax.set_axis_off()
    ax.set_title("Wards by council")
    st.pyplot(fig)

st.markdown("---")

# Validity
st.subheader("Valid geometry comes first")
st.markdown(
    """
    Spatial predicates such as *contains* or *intersects* assume each polygon has a closed,
    non-self-intersecting boundary. A "bow-tie" polygon breaks that rule. `make_valid` rewrites it
    as an equivalent valid shape (here, a multipolygon of two triangles).
    """
)
try:
    with st.echo():
        invalid = wards.loc[~wards.is_valid, WARD_NAME_COL].tolist()
        wards_valid = repair_geometries(wards)
except InvalidGeometry as e:
    st.error(f"Geometry repair failed: {e}")
    st.stop()

col1, col2 = st.columns(2)
with col1:
    st.metric("Invalid before repair", len(invalid))
    if invalid:
        st.caption(", ".join(invalid))
with col2:
    st.metric("Invalid after repair", int((~wards_valid.is_valid).sum()))
    st.caption(f"Geometry types now: {', '.join(sorted(wards_valid.geom_type.unique()))}")

st.markdown("---")
with st.container(border=True):
    st.page_link("pages/02_Coordinate_Reference_Systems.py", label="Next: Coordinate Reference Systems", icon="➡️")

# Footer for Sourcing and Licensing
with st.expander("Sources & Licensing", expanded=False):
    st.markdown(generate_attribution_markdown())
