# Imports
import streamlit as st
import geopandas as gpd
import matplotlib.pyplot as plt
from shapely.geometry import Point
from licensing import generate_attribution_markdown
from spatial import point_in_polygon_join, repair_geometries, sample_points, shared_boundary_point
from utils import load_ward_boundaries, load_or_stop, WARD_NAME_COL, COUNCIL_COL

# Page Config
st.set_page_config(
    page_title="Spatial Join - Gender Gaps",
    layout="wide"
)

st.title("6. Spatial Join")
st.markdown(
    """
    A **spatial join** matches rows by *where they are* instead of by a shared key. The classic case
    is point-in-polygon: which ward is this address, school or survey respondent in?

    To try it we scatter random points **inside** the wards and ask geopandas to find the polygon that
    contains each one. Every sampled point should land back in exactly one ward.
    """
)

# Sidebar
with st.sidebar:
    st.markdown("## Slide Controls")
    per_ward = st.slider("Points per ward", min_value=1, max_value=25, value=5)
    seed = st.number_input("Random seed", min_value=0, value=42, step=1)

with st.echo():
    wards = load_or_stop(lambda: repair_geometries(load_ward_boundaries()))
    points = sample_points(wards, per_polygon=per_ward, seed=int(seed))
    located = point_in_polygon_join(points, wards[[WARD_NAME_COL, COUNCIL_COL, "geometry"]])

matched = located[WARD_NAME_COL].notna()
agree = (located["source"] == located[WARD_NAME_COL]).sum()

col1, col2, col3 = st.columns(3)
with col1:
    st.metric("Points", len(located))
with col2:
    st.metric("Matched to a ward", int(matched.sum()))
with col3:
    st.metric("Matched to the ward they came from", int(agree))

col_map, col_table = st.columns([3, 2])
with col_map:
    fig, ax = plt.subplots(figsize=(7, 6))
    wards.plot(ax=ax, color="#f0f0f0", edgecolor="#636363")
    located.plot(ax=ax, column=WARD_NAME_COL, markersize=12, categorical=True, legend=False)
    ax.set_axis_off()
    ax.set_title("Sampled points coloured by the ward they joined to")
    st.pyplot(fig)
with col_table:
    st.dataframe(located[["source", WARD_NAME_COL, COUNCIL_COL]], hide_index=True, height=420)

st.markdown("---")

# Edge cases
st.subheader("Two awkward points")
st.markdown(
    """
    * A point **outside every ward** keeps empty attributes. It is not an error.
    * A point **exactly on a shared boundary** touches two wards. The join keeps the **first** ward
      in the boundary table's row order, so the answer is the same every time.
    """
)
minx, miny, maxx, maxy = wards.total_bounds
with st.echo():
    on_edge = shared_boundary_point(wards, position=0)
    labels, geometry = ["outside"], [Point(minx - 1000, miny - 1000)]
    if on_edge is not None:
        labels.append("shared boundary")
        geometry.append(on_edge)
    awkward = gpd.GeoDataFrame({"label": labels}, geometry=geometry, crs=wards.crs)
    awkward_located = point_in_polygon_join(awkward, wards[[WARD_NAME_COL, "geometry"]])

st.dataframe(awkward_located[["label", WARD_NAME_COL]], hide_index=True)

st.markdown("---")
with st.container(border=True):
    st.page_link("pages/07_Static_Maps.py", label="Next: Static Maps", icon="➡️")

# Footer for Sourcing and Licensing
with st.expander("Sources & Licensing", expanded=False):
    st.markdown(generate_attribution_markdown())
