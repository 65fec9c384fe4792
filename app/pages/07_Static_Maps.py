# Imports
import io
import streamlit as st
from licensing import generate_attribution_markdown
from render import build_render_spec, render_static, DEFAULT_EDGES
from scores import calculate_equality_scores, gap_column
from spatial import attribute_join, repair_geometries
from utils import load_nssec_counts, load_ward_boundaries, load_or_stop, CATEGORIES, CATEGORY_LABELS

# Page Config
st.set_page_config(
    page_title="Static Maps - Gender Gaps",
    layout="wide"
)

st.title("7. Static Maps")
st.markdown(
    """
    A **choropleth** colours each region by a value. For a printable map we need four ingredients
    on top of the polygons: a **colour scale** with class breaks, a **legend**, a **scale bar** and,
    optionally, **labels**.

    All of these go into one `RenderSpec`. Nothing is set globally: the palette and the font travel
    with the spec, so two maps on the same slide cannot interfere with each other.
    """
)

# Sidebar
with st.sidebar:
    st.markdown("## Map Controls")
    category = st.selectbox("Category", CATEGORIES, format_func=lambda c: f"{c}: {CATEGORY_LABELS[c]}")
    show_labels = st.toggle("Ward labels", value=True)
    palette = st.selectbox("Palette", ["RdBu", "PuOr", "BrBG", "PiYG"], index=0)

wards = load_or_stop(lambda: repair_geometries(load_ward_boundaries()))
scores = calculate_equality_scores(load_or_stop(load_nssec_counts))
joined, report = attribute_join(wards, scores)

with st.echo():
    spec = build_render_spec(
        joined,
        fill_column=gap_column(category),
        legend_name=f"Equality score, {category}",
        edges=DEFAULT_EDGES,
        with_labels=show_labels,
        fill_color=palette,
    )
    fig = render_static(joined, spec)

st.pyplot(fig)

col1, col2 = st.columns(2)
with col1:
    st.markdown("**Class breaks**")
    st.code(", ".join(f"{b:g}" for b in spec.bins))
with col2:
    st.markdown("**Map centre (lat, lon)**")
    st.code(f"{spec.center[0]:.4f}, {spec.center[1]:.4f}")

buffer = io.BytesIO()
fig.savefig(buffer, format="png", dpi=200, bbox_inches="tight")
st.download_button("Download PNG", data=buffer.getvalue(), file_name=f"equality_{category}.png", mime="image/png")

if report.dropped_boundaries:
    st.caption(f"Not shown (no census row): {', '.join(report.dropped_boundaries)}")

st.markdown("---")
with st.container(border=True):
    st.page_link("pages/08_Interactive_Maps.py", label="Next: Interactive Maps", icon="➡️")

# Footer for Sourcing and Licensing
with st.expander("Sources & Licensing", expanded=False):
    st.markdown(generate_attribution_markdown())
