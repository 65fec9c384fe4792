# Imports
import streamlit as st
from licensing import generate_attribution_markdown
from scores import exclude_aggregate, to_wide
from utils import (
    load_nssec_counts, load_or_stop, NSSEC_COUNTS_FILE,
    AGGREGATE_NAME, CATEGORY_LABELS, TABLE_WARD_COL
)

# Page Config
st.set_page_config(
    page_title="Census Data - Gender Gaps",
    layout="wide"
)

st.title("3. Census Data")
st.markdown(
    """
    The census table counts residents aged 16 to 74 in each **NS-SeC** category, separately for
    **Female**, **Male** and **All**. On disk there is one row per ward and sex with one column per
    category. We read it into **long** form (one row per ward, category and sex), which is
    easy to filter, and then pivot it **wide** (one row per ward) for the arithmetic.
    """
)

with st.expander("NS-SeC categories", expanded=False):
    st.table({"Category": list(CATEGORY_LABELS.keys()), "Description": list(CATEGORY_LABELS.values())})

# Load
st.subheader("Long form")
with st.echo():
    counts = load_or_stop(load_nssec_counts)

st.dataframe(counts.head(24), hide_index=True)
st.caption(f"{len(counts)} rows read from `{NSSEC_COUNTS_FILE.name}`. Cells printed as '-' are read as 0.")

st.markdown("---")

# Filter
st.subheader("Dropping the national total")
st.markdown(f"The table ends with a **{AGGREGATE_NAME}** row per sex. It is not a ward, so it goes.")
with st.echo():
    ward_counts = exclude_aggregate(counts, AGGREGATE_NAME)

col1, col2 = st.columns(2)
with col1:
    st.metric("Areas before", counts[TABLE_WARD_COL].nunique())
with col2:
    st.metric("Wards after", ward_counts[TABLE_WARD_COL].nunique())

st.markdown("---")

# Reshape
st.subheader("Wide form")
st.markdown("Each (category, sex) pair becomes its own column, e.g. `C1_Female`, `C1_Male`, `C1_All`.")
with st.echo():
    wide = to_wide(ward_counts)

st.dataframe(wide, hide_index=True)

missing = wide.isna().sum()
missing = missing[missing > 0]
if not missing.empty:
    st.info(f"Cells without a usable count: {missing.to_dict()}")

st.markdown("---")
with st.container(border=True):
    st.page_link("pages/04_Equality_Score.py", label="Next: Equality Score", icon="➡️")

# Footer for Sourcing and Licensing
with st.expander("Sources & Licensing", expanded=False):
    st.markdown(generate_attribution_markdown())
