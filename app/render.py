# Imports
from dataclasses import dataclass
import numpy as np
import pandas as pd
import geopandas as gpd
import matplotlib
import matplotlib.pyplot as plt
from matplotlib.colors import BoundaryNorm
import folium
from spatial import reproject
from utils import BRITISH_NATIONAL_GRID, WGS84, WARD_NAME_COL, COUNCIL_COL

# Constants
DEFAULT_EDGES = [50, 80, 100, 125, 200]
MIN_EDGES = 4  # folium needs at least three colour classes
DEFAULT_ZOOM = 10
DEFAULT_PALETTE = "RdBu"
DEFAULT_TILES = "CartoDB positron"
DEFAULT_FONT = "DejaVu Sans"
NAN_COLOUR = "#d9d9d9"


@dataclass(frozen=True)
class RenderSpec:
    """Everything a renderer needs besides the data itself."""
    fill_column: str
    bins: tuple
    center: tuple  # (lat, lon)
    zoom: int
    legend_name: str
    labels: pd.DataFrame = None
    fill_color: str = DEFAULT_PALETTE
    tiles: str = DEFAULT_TILES
    font_family: str = DEFAULT_FONT
    nan_fill_color: str = NAN_COLOUR


# Spec Construction
def make_bins(values, edges=DEFAULT_EDGES):
    """
    Ascending class breaks for a choropleth. The outer breaks are the data
    minimum and maximum (rounded outwards) so every value falls in a class;
    interior breaks are the given edges that lie strictly inside that range.
    """
    values = pd.Series(values, dtype=float).dropna()
    edges = sorted(set(float(e) for e in edges))
    if values.empty:
        return tuple(edges)
    low, high = float(np.floor(values.min())), float(np.ceil(values.max()))
    if high <= low:
        high = low + 1
    bins = [low] + [e for e in edges if low < e < high] + [high]
    if len(bins) < MIN_EDGES:
        bins = [float(b) for b in np.linspace(low, high, MIN_EDGES)]
    return tuple(bins)


def map_center(gdf: gpd.GeoDataFrame, subset=None):
    """Centroid (lat, lon) of the union of all regions, or of those selected by a boolean mask."""
    regions = gdf if subset is None else gdf[subset]
    if regions.empty:
        raise ValueError("Cannot centre a map on an empty set of regions")
    projected = reproject(regions, BRITISH_NATIONAL_GRID)
    centroid = projected.geometry.union_all().centroid
    point = gpd.GeoSeries([centroid], crs=BRITISH_NATIONAL_GRID).to_crs(WGS84).iloc[0]
    return point.y, point.x


def label_points(gdf: gpd.GeoDataFrame, name_column=WARD_NAME_COL) -> pd.DataFrame:
    """Polygon centroids as separate lon/lat columns, for placing text labels."""
    projected = reproject(gdf, BRITISH_NATIONAL_GRID)
    centroids = projected.geometry.centroid.to_crs(WGS84)
    return pd.DataFrame({
        "name": gdf[name_column].values,
        "lon": centroids.x.values,
        "lat": centroids.y.values
    })


def build_render_spec(joined: gpd.GeoDataFrame, fill_column, legend_name=None, edges=DEFAULT_EDGES,
                      zoom=DEFAULT_ZOOM, with_labels=False, subset=None, name_column=WARD_NAME_COL,
                      **style) -> RenderSpec:
    return RenderSpec(
        fill_column=fill_column,
        bins=make_bins(joined[fill_column], edges),
        center=map_center(joined, subset),
        zoom=zoom,
        legend_name=legend_name or fill_column,
        labels=label_points(joined, name_column) if with_labels else None,
        **style
    )


# Static Maps
def _nice_length(target_km):
    """Largest 1, 2 or 5 x 10^n kilometres not above the target."""
    if target_km <= 0:
        return 1
    magnitude = 10 ** np.floor(np.log10(target_km))
    for step in (5, 2, 1):
        if step * magnitude <= target_km:
            return float(step * magnitude)
    return float(magnitude)


def add_scale_bar(ax, length_km=None):
    """Draws a scale bar in the lower left corner of an axis plotted in metres."""
    xmin, xmax = ax.get_xlim()
    ymin, ymax = ax.get_ylim()
    if length_km is None:
        length_km = _nice_length((xmax - xmin) / 5 / 1000)
    x0 = xmin + (xmax - xmin) * 0.05
    y0 = ymin + (ymax - ymin) * 0.05
    ax.plot([x0, x0 + length_km * 1000], [y0, y0], color="black", linewidth=3, solid_capstyle="butt")
    ax.text(x0 + length_km * 500, y0 + (ymax - ymin) * 0.015, f"{length_km:g} km",
            ha="center", va="bottom", fontsize=8)
    ax.set_xlim(xmin, xmax)
    ax.set_ylim(ymin, ymax)
    return length_km


def render_static(joined: gpd.GeoDataFrame, spec: RenderSpec, figsize=(8, 8), scale_bar_km=None):
    """Choropleth in British National Grid with a stepped colour scale, legend, scale bar and optional labels."""
    plot_gdf = reproject(joined, BRITISH_NATIONAL_GRID)
    n_classes = len(spec.bins) - 1
    cmap = matplotlib.colormaps[spec.fill_color].resampled(n_classes)
    norm = BoundaryNorm(list(spec.bins), n_classes)
    with plt.rc_context({"font.family": spec.font_family}):
        fig, ax = plt.subplots(figsize=figsize)
        plot_gdf.plot(
            column=spec.fill_column,
            cmap=cmap,
            norm=norm,
            edgecolor="white",
            linewidth=0.6,
            legend=True,
            legend_kwds={"label": spec.legend_name, "shrink": 0.6, "ticks": list(spec.bins)},
            missing_kwds={"color": spec.nan_fill_color, "label": "No data"},
            ax=ax
        )
        if spec.labels is not None and not spec.labels.empty:
            label_xy = gpd.GeoSeries(
                gpd.points_from_xy(spec.labels["lon"], spec.labels["lat"]), crs=WGS84
            ).to_crs(BRITISH_NATIONAL_GRID)
            for name, point in zip(spec.labels["name"], label_xy):
                ax.annotate(name, xy=(point.x, point.y), ha="center", va="center", fontsize=7)
        ax.set_axis_off()
        add_scale_bar(ax, scale_bar_km)
        ax.set_title(spec.legend_name)
    return fig


# Interactive Maps
def _score_label(value):
    return "n/a" if pd.isna(value) else f"{value:.0f}"


def render_interactive(joined: gpd.GeoDataFrame, spec: RenderSpec, key_column=WARD_NAME_COL,
                       popup_fields=None) -> folium.Map:
    """Leaflet choropleth with tooltips, popups, a scale control and optional labels."""
    web_gdf = reproject(joined, WGS84)
    web_gdf["score_label"] = web_gdf[spec.fill_column].map(_score_label)

    m = folium.Map(location=list(spec.center), zoom_start=spec.zoom, tiles=spec.tiles, control_scale=True)

    folium.Choropleth(
        geo_data=web_gdf,
        name=spec.legend_name,
        data=web_gdf,
        columns=[key_column, spec.fill_column],
        key_on=f"feature.properties.{key_column}",
        fill_color=spec.fill_color,
        fill_opacity=0.7,
        line_opacity=0.6,
        nan_fill_color=spec.nan_fill_color,
        legend_name=spec.legend_name,
        bins=list(spec.bins),
        highlight=True
    ).add_to(m)

    # Transparent layer carrying the hover text and popups
    if popup_fields is None:
        popup_fields = [c for c in (key_column, COUNCIL_COL) if c in web_gdf.columns]
    fields = list(popup_fields) + ["score_label"]
    layer_fields = list(dict.fromkeys([key_column] + fields))
    folium.GeoJson(
        web_gdf[layer_fields + [web_gdf.geometry.name]],
        name="Details",
        style_function=lambda x: {"color": "transparent", "fillColor": "transparent", "weight": 0},
        highlight_function=lambda x: {"weight": 2, "color": "black"},
        tooltip=folium.GeoJsonTooltip(fields=[key_column], aliases=["Ward:"], sticky=True),
        popup=folium.GeoJsonPopup(fields=fields, aliases=[f"{f}:" for f in popup_fields] + ["Score:"])
    ).add_to(m)

    if spec.labels is not None:
        for row in spec.labels.itertuples(index=False):
            folium.Marker(
                location=[row.lat, row.lon],
                icon=folium.DivIcon(html=f'<div style="font-size: 8pt; font-family: {spec.font_family};">{row.name}</div>')
            ).add_to(m)

    folium.LayerControl().add_to(m)
    return m
