# Imports
import streamlit as st
from licensing import generate_attribution_markdown
from scores import calculate_equality_scores
from spatial import attribute_join, repair_geometries
from utils import load_nssec_counts, load_ward_boundaries, load_or_stop, WARD_NAME_COL, COUNCIL_COL, TABLE_WARD_COL

# Page Config
st.set_page_config(
    page_title="Attribute Join - Gender Gaps",
    layout="wide"
)

st.title("5. Attribute Join")
st.markdown(
    """
    The boundaries and the scores share one thing: the **ward name**. An **attribute join** lines the
    two tables up on that key, just like a database join. Geometry plays no part.

    We use an **inner join**: a ward survives only if it appears on **both** sides. The match is
    exact and case sensitive, so `"Forth"` and `"forth"` are different wards. Anything dropped is
    reported rather than silently lost.
    """
)

with st.echo():
    wards = load_or_stop(lambda: repair_geometries(load_ward_boundaries()))
    scores = calculate_equality_scores(load_or_stop(load_nssec_counts))
    joined, report = attribute_join(wards, scores, left_on=WARD_NAME_COL, right_on=TABLE_WARD_COL)

col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Boundaries", len(wards))
with col2:
    st.metric("Score rows", len(scores))
with col3:
    st.metric("Joined", len(joined))
with col4:
    st.metric("Dropped", report.dropped)

if report.dropped:
    col_left, col_right = st.columns(2)
    with col_left:
        st.warning("**Boundaries without scores**\n\n" + ("\n".join(f"- {n}" for n in report.dropped_boundaries)
                                                        or "None"))
    with col_right:
        st.warning("**Scores without boundaries**\n\n" + ("\n".join(f"- {n}" for n in report.dropped_scores)
                                                        or "None"))
    st.caption("Typical causes: boundary changes between census and map vintages, or spelling differences.")
else:
    st.success("Every ward matched.")

st.subheader("The joined table")
st.dataframe(
    joined.drop(columns="geometry").set_index(WARD_NAME_COL).round(1),
    width='stretch'
)
st.caption(f"Still a GeoDataFrame: {type(joined).__name__}, CRS EPSG:{joined.crs.to_epsg()}. "
           f"Columns kept from the boundaries: {WARD_NAME_COL}, {COUNCIL_COL}, geometry.")

st.markdown("---")
with st.container(border=True):
    st.page_link("pages/06_Spatial_Join.py", label="Next: Spatial Join", icon="➡️")

# Footer for Sourcing and Licensing
with st.expander("Sources & Licensing", expanded=False):
    st.markdown(generate_attribution_markdown())
