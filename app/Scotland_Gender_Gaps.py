# Imports
import streamlit as st

# Page Config
st.set_page_config(
    page_title="Gender Gaps in Scottish Wards",
    layout="wide"
)

# Header
st.title("Mapping Gender Gaps in Scottish Wards")
st.markdown("---")

# Intro
col_intro, col_side = st.columns([2, 1])
with col_intro:
    st.subheader("A hands-on introduction to spatial data in Python")
    st.write(
        "This deck walks through a small but complete spatial analysis. We load **ward boundaries**, "
        "join them to a **census table**, compute a simple **equality score** and draw it as a "
        "**choropleth map**, first as a static figure and then as an interactive web map."
    )
    st.write(
        "Every slide shows the code it runs. The snippets are short on purpose: the heavy lifting "
        "(reading geometry files, transforming coordinates, testing containment, drawing) is done by "
        "**geopandas**, **shapely**, **matplotlib** and **folium**."
    )

with col_side:
    with st.container(border=True):
        st.markdown("#### You will need")
        st.markdown("- pandas\n- geopandas & shapely\n- matplotlib\n- folium\n- streamlit")

# Case Study Container
with st.container(border=True):
    st.subheader("📊 The Case Study")
    st.markdown(
        """
        Scotland's Census reports the **National Statistics Socio-economic Classification (NS-SeC)** of
        residents by sex. NS-SeC groups people into eight categories, from *C1 Higher managerial and
        professional occupations* to *C8 Never worked and long-term unemployed*.

        For each ward and category we ask: **are women and men equally likely to be found here?**
        A score of **100** means parity, **above 100** means women are over-represented and
        **below 100** means men are over-represented.
        """
    )

# Route Container
with st.container(border=True):
    st.subheader("🧭 The Route")
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.markdown("#### 1. Load")
        st.caption("Simple features & CRS")
    with c2:
        st.markdown("#### 2. Reshape")
        st.caption("Long to wide census counts")
    with c3:
        st.markdown("#### 3. Join")
        st.caption("By name and by location")
    with c4:
        st.markdown("#### 4. Map")
        st.caption("Static & interactive choropleths")

st.markdown("---")

# Navigation Grid
st.subheader("Slides")
SLIDES = [
    ("pages/01_Simple_Features.py", "**Simple Features**", "🧩", "Geometry plus attributes in one table."),
    ("pages/02_Coordinate_Reference_Systems.py", "**Coordinate Reference Systems**", "🌐", "EPSG codes and reprojection."),
    ("pages/03_Census_Data.py", "**Census Data**", "📋", "Reading and reshaping the NS-SeC table."),
    ("pages/04_Equality_Score.py", "**Equality Score**", "⚖️", "From counts to a single number."),
    ("pages/05_Attribute_Join.py", "**Attribute Join**", "🔗", "Matching tables by ward name."),
    ("pages/06_Spatial_Join.py", "**Spatial Join**", "📍", "Matching points to polygons."),
    ("pages/07_Static_Maps.py", "**Static Maps**", "🗺️", "A printable choropleth."),
    ("pages/08_Interactive_Maps.py", "**Interactive Maps**", "🖱️", "A web map with popups."),
    ("pages/09_Sources_&_Licensing.py", "**Sources & Licensing**", "⚖️", "Where the data comes from."),
]
for left, right in zip(SLIDES[0::2], SLIDES[1::2] + [None]):
    col1, col2 = st.columns(2)
    for col, slide in ((col1, left), (col2, right)):
        if slide is None:
            continue
        path, label, icon, caption = slide
        with col:
            with st.container(border=True):
                st.page_link(path, label=label, icon=icon)
                st.caption(caption)
