# Imports
import streamlit as st
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import plotly.express as px
from licensing import generate_attribution_markdown
from scores import (
    calculate_equality_scores, count_undefined_scores, equality_score, exclude_aggregate,
    formula_discrepancy, interpret_score, long_scores, ratio_of_ratios_score, to_wide,
    gap_column, GAP_COLUMNS, PARITY
)
from utils import load_nssec_counts, load_or_stop, CATEGORIES, CATEGORY_LABELS, TABLE_WARD_COL

# Page Config
st.set_page_config(
    page_title="Equality Score - Gender Gaps",
    layout="wide"
)


# Helpers
def plot_score_heatmap(scores):
    """Ward x category heatmap centred on parity."""
    grid = scores.set_index(TABLE_WARD_COL)[GAP_COLUMNS]
    grid.columns = CATEGORIES
    fig, ax = plt.subplots(figsize=(9, 6))
    sns.heatmap(grid, annot=True, fmt=".0f", cmap="RdBu", center=PARITY, ax=ax,
                cbar_kws={"label": "Equality score"})
    ax.set_xlabel("NS-SeC category")
    ax.set_ylabel("")
    ax.set_title("Equality score by ward and category (blank = undefined)")
    return fig


st.title("4. The Equality Score")
st.markdown(
    r"""
    For a ward and a category we compare how likely a woman and a man are to be in that category.
    The case study writes it as a ratio of two shares of the same total:

    $$\text{gap}(C) = \frac{\text{female}(C) / \text{total}(C)}{\text{male}(C) / \text{total}(C)} \times 100$$

    Both shares have the same denominator, so it cancels:

    $$\text{gap}(C) = \frac{\text{female}(C)}{\text{male}(C)} \times 100$$

    * **100** parity
    * **above 100** women over-represented
    * **below 100** men over-represented

    If a category has **no men** the score is **undefined** and is left blank rather than
    dividing by zero.
    """
)

# Small example
st.subheader("A worked example")
with st.echo():
    example = equality_score(female=[2, 5, 3], male=[8, 5, 0], total=[10, 10, 3])

cols = st.columns(3)
for col, (label, value) in zip(cols, zip(["Ward A (2, 8, 10)", "Ward B (5, 5, 10)", "Ward C (3, 0, 3)"], example)):
    with col:
        st.metric(label, "undefined" if pd.isna(value) else f"{value:.0f}")
        st.caption(interpret_score(value))

st.markdown("---")

# Full calculation
st.subheader("Every ward, every category")
with st.echo():
    counts = load_or_stop(load_nssec_counts)
    scores = calculate_equality_scores(counts)

st.pyplot(plot_score_heatmap(scores))

undefined = count_undefined_scores(scores)
if undefined.sum():
    st.warning(
        "Undefined scores (no men in the category): "
        + ", ".join(f"{col.replace('gap_', '')}: {n}" for col, n in undefined.items() if n)
    )

st.markdown("---")

# Distribution
st.subheader("How do the categories compare?")
tidy = long_scores(scores).dropna(subset=["gap"])
tidy["Description"] = tidy["Category"].map(CATEGORY_LABELS)
fig = px.strip(
    tidy, x="Category", y="gap", hover_name=TABLE_WARD_COL, hover_data=["Description"],
    category_orders={"Category": CATEGORIES},
    labels={"gap": "Equality score"}
)
fig.add_hline(y=PARITY, line_dash="dash", line_color="grey", annotation_text="parity")
st.plotly_chart(fig, width='stretch')

selected = st.selectbox("Rank wards for category", CATEGORIES, format_func=lambda c: f"{c}: {CATEGORY_LABELS[c]}")
ranked = scores[[TABLE_WARD_COL, gap_column(selected)]].sort_values(gap_column(selected), ascending=False)
ranked["Reading"] = ranked[gap_column(selected)].map(interpret_score)
st.dataframe(ranked, hide_index=True, width='stretch')

st.markdown("---")

# Formula check
st.subheader("Does the simplification change anything?")
st.markdown(
    "We keep the original ratio-of-ratios as a reference and compare it with the simplified form on every "
    "cell where both are defined."
)
with st.echo():
    wide = to_wide(exclude_aggregate(counts))
    worst = formula_discrepancy(wide)

st.metric("Largest difference between the two formulas", f"{worst:.2e}")
st.caption(
    "Only floating point noise. The two forms differ only if the shares were meant to use different "
    "denominators, for example weighting by total population, which the case study does not do."
)
with st.expander("Side by side for C1", expanded=False):
    c1 = wide[[TABLE_WARD_COL, "C1_Female", "C1_Male", "C1_All"]].copy()
    c1["simplified"] = equality_score(c1["C1_Female"], c1["C1_Male"], c1["C1_All"]).values
    c1["ratio_of_ratios"] = ratio_of_ratios_score(c1["C1_Female"], c1["C1_Male"], c1["C1_All"]).values
    st.dataframe(c1, hide_index=True)

st.markdown("---")
with st.container(border=True):
    st.page_link("pages/05_Attribute_Join.py", label="Next: Attribute Join", icon="➡️")

# Footer for Sourcing and Licensing
with st.expander("Sources & Licensing", expanded=False):
    st.markdown(generate_attribution_markdown())
