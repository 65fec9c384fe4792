# Imports
import streamlit as st
from streamlit_folium import st_folium
from licensing import generate_attribution_markdown
from render import build_render_spec, render_interactive, DEFAULT_TILES
from scores import calculate_equality_scores, gap_column
from spatial import attribute_join, repair_geometries
from utils import (
    load_nssec_counts, load_ward_boundaries, load_or_stop,
    CATEGORIES, CATEGORY_LABELS, COUNCIL_COL, WARD_NAME_COL
)

# Page Config
st.set_page_config(
    page_title="Interactive Maps - Gender Gaps",
    layout="wide"
)

TILE_OPTIONS = [DEFAULT_TILES, "OpenStreetMap", "CartoDB dark_matter"]

st.title("8. Interactive Maps")
st.markdown(
    """
    The same `RenderSpec` drives a **Leaflet** web map through folium. The extras here are a
    **basemap** (tile provider), **tooltips** on hover and **popups** on click. The map opens on the
    centroid of the wards, or of the councils you pick in the sidebar.
    """
)

wards = load_or_stop(lambda: repair_geometries(load_ward_boundaries()))
scores = calculate_equality_scores(load_or_stop(load_nssec_counts))
joined, report = attribute_join(wards, scores)

# Sidebar
with st.sidebar:
    st.markdown("## Map Controls")
    category = st.selectbox("Category", CATEGORIES, format_func=lambda c: f"{c}: {CATEGORY_LABELS[c]}")
    tiles = st.selectbox("Basemap", TILE_OPTIONS, index=0)
    zoom = st.slider("Zoom", min_value=7, max_value=14, value=11)
    councils = st.multiselect("Centre on council(s)", sorted(joined[COUNCIL_COL].unique()),
                              placeholder="All councils")
    show_labels = st.toggle("Ward labels", value=False)

with st.echo():
    subset = joined[COUNCIL_COL].isin(councils) if councils else None
    spec = build_render_spec(
        joined,
        fill_column=gap_column(category),
        legend_name=f"Equality score, {category} ({CATEGORY_LABELS[category]})",
        zoom=zoom,
        subset=subset,
        with_labels=show_labels,
        tiles=tiles,
    )
    m = render_interactive(joined, spec, key_column=WARD_NAME_COL)

map_output = st_folium(m, width="100%", height=600, key=f"map_{category}", returned_objects=["last_object_clicked_popup"])

if map_output and map_output.get("last_object_clicked_popup"):
    st.info(map_output["last_object_clicked_popup"])

with st.expander("Export", expanded=False):
    st.markdown("The map is a self-contained HTML document that can be shared without Python.")
    st.download_button("Download HTML", data=m.get_root().render(), file_name=f"equality_{category}.html",
                       mime="text/html")

st.markdown("---")
with st.container(border=True):
    st.page_link("pages/09_Sources_&_Licensing.py", label="Next: Sources & Licensing", icon="➡️")

# Footer for Sourcing and Licensing
with st.expander("Sources & Licensing", expanded=False):
    st.markdown(generate_attribution_markdown())
