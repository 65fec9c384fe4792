# Imports
import logging
from dataclasses import dataclass
import pandas as pd
import geopandas as gpd
from utils import InvalidGeometry, WARD_NAME_COL, TABLE_WARD_COL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JoinReport:
    """Keys that appeared on only one side of an attribute join."""
    dropped_boundaries: tuple = ()
    dropped_scores: tuple = ()

    @property
    def dropped(self) -> int:
        return len(self.dropped_boundaries) + len(self.dropped_scores)


# Coordinate Reference Systems
def report_crs(gdf: gpd.GeoDataFrame):
    """EPSG code of the frame's CRS, or None when it has no EPSG equivalent."""
    if gdf.crs is None:
        return None
    return gdf.crs.to_epsg()


def reproject(gdf: gpd.GeoDataFrame, epsg: int) -> gpd.GeoDataFrame:
    """Returns a new frame in the target CRS. Attributes are carried over unchanged."""
    if gdf.crs is None:
        raise ValueError("Cannot reproject a frame without a coordinate reference system")
    if report_crs(gdf) == epsg:
        return gdf.copy()
    return gdf.to_crs(epsg)


def repair_geometries(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Repairs invalid polygons (e.g. self-intersections) with make_valid.
    Raises InvalidGeometry if anything is still invalid or empty afterwards.
    """
    invalid = ~gdf.geometry.is_valid
    repaired = gdf.copy()
    if invalid.any():
        logger.warning(f"Repairing {int(invalid.sum())} invalid geometries")
        repaired.loc[invalid, repaired.geometry.name] = gdf.geometry[invalid].make_valid()
    broken = ~repaired.geometry.is_valid | repaired.geometry.is_empty
    if broken.any():
        names = repaired.loc[broken, WARD_NAME_COL].tolist() if WARD_NAME_COL in repaired.columns else []
        raise InvalidGeometry(f"{int(broken.sum())} geometries could not be repaired {names}")
    return repaired


# Attribute Join
def attribute_join(wards: gpd.GeoDataFrame, scores: pd.DataFrame,
                   left_on=WARD_NAME_COL, right_on=TABLE_WARD_COL):
    """
    Inner join of ward geometries and score rows on an exact, case-sensitive name match.
    Returns the joined GeoDataFrame and a JoinReport of the names dropped from each side.
    """
    # Rows without a name can never match
    wards = wards.dropna(subset=[left_on])
    scores = scores.dropna(subset=[right_on])
    boundary_keys = set(wards[left_on])
    score_keys = set(scores[right_on])
    report = JoinReport(
        dropped_boundaries=tuple(sorted(boundary_keys - score_keys)),
        dropped_scores=tuple(sorted(score_keys - boundary_keys))
    )
    joined = wards.merge(scores, left_on=left_on, right_on=right_on, how="inner")
    if right_on != left_on and right_on in joined.columns:
        joined = joined.drop(columns=right_on)
    if report.dropped:
        logger.warning(
            f"Join dropped {len(report.dropped_boundaries)} boundaries without scores "
            f"{list(report.dropped_boundaries)} and {len(report.dropped_scores)} score rows without boundaries "
            f"{list(report.dropped_scores)}"
        )
    logger.info(f"Joined {len(joined)} wards to their scores")
    return joined, report


# Point-in-Polygon Join
def sample_points(polygons: gpd.GeoDataFrame, per_polygon=5, seed=None, name_column=WARD_NAME_COL):
    """
    Samples points uniformly inside each polygon. The returned frame records
    the name of the polygon each point was drawn from in 'source'.
    """
    sampled = polygons.geometry.sample_points(per_polygon, rng=seed)
    points = sampled.explode(index_parts=False)
    source = polygons[name_column].reindex(points.index).values if name_column in polygons.columns else points.index
    return gpd.GeoDataFrame({"source": source}, geometry=points.values, crs=polygons.crs).reset_index(drop=True)


def point_in_polygon_join(points: gpd.GeoDataFrame, polygons: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Gives every point the attributes of the polygon containing it.
    Points outside all polygons keep null attributes. A point on a shared
    boundary touches several polygons and is assigned to the first of them
    in the polygons' row order.
    """
    points = points.reset_index(drop=True)
    polygons = polygons.reset_index(drop=True)
    if points.crs != polygons.crs:
        points = points.to_crs(polygons.crs)
    joined = gpd.sjoin(points, polygons, how="left", predicate="intersects")
    joined = joined.sort_values("index_right", na_position="last", kind="mergesort")
    joined = joined[~joined.index.duplicated(keep="first")].sort_index()
    unmatched = int(joined["index_right"].isna().sum())
    if unmatched:
        logger.info(f"{unmatched} of {len(joined)} points fell outside every polygon")
    return joined.rename(columns={"index_right": "polygon_index"})


def shared_boundary_point(polygons: gpd.GeoDataFrame, position=0):
    """
    A point on the edge shared by the polygon at `position` and its first
    touching neighbour, or None when that polygon has no neighbour.
    """
    target = polygons.geometry.iloc[position]
    others = polygons.geometry.drop(polygons.index[position])
    neighbours = others[others.touches(target)]
    for neighbour in neighbours:
        edge = target.intersection(neighbour)
        if edge.geom_type == "LineString":
            return edge.interpolate(0.5, normalized=True)
        if not edge.is_empty:
            return edge.representative_point()
    return None
