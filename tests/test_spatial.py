import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import Point, Polygon

from spatial import (
    attribute_join, point_in_polygon_join, repair_geometries, report_crs, reproject, sample_points,
    shared_boundary_point, JoinReport
)
from utils import InvalidGeometry, read_nssec_counts, read_ward_boundaries
from scores import calculate_equality_scores


def without_crs(gdf):
    return gpd.GeoDataFrame(pd.DataFrame(gdf.drop(columns="geometry")), geometry=list(gdf.geometry))


# Attribute join
def test_join_drops_unmatched_boundary(square_wards, scores_ab):
    joined, report = attribute_join(square_wards, scores_ab)

    assert len(joined) == 2
    assert sorted(joined["Name"]) == ["A", "B"]
    assert report.dropped_boundaries == ("C",)
    assert report.dropped_scores == ()
    assert report.dropped == 1


def test_join_result_is_geodataframe(square_wards, scores_ab):
    joined, _ = attribute_join(square_wards, scores_ab)

    assert isinstance(joined, gpd.GeoDataFrame)
    assert joined.crs == square_wards.crs
    assert "Ward" not in joined.columns
    assert joined.set_index("Name").loc["A", "gap_C1"] == pytest.approx(25.0)


def test_join_dropped_count_is_symmetric_difference(square_wards):
    scores = pd.DataFrame({"Ward": ["A", "B", "D", "E"], "gap_C1": [1.0, 2.0, 3.0, 4.0]})

    joined, report = attribute_join(square_wards, scores)

    keys_left, keys_right = set(square_wards["Name"]), set(scores["Ward"])
    assert report.dropped == len(keys_left ^ keys_right)
    assert len(joined) <= min(len(square_wards), len(scores))
    assert report.dropped_scores == ("D", "E")


def test_join_is_case_sensitive(square_wards):
    scores = pd.DataFrame({"Ward": ["a", "B"], "gap_C1": [1.0, 2.0]})

    joined, report = attribute_join(square_wards, scores)

    assert joined["Name"].tolist() == ["B"]
    assert "a" in report.dropped_scores
    assert "A" in report.dropped_boundaries


def test_join_report_defaults():
    assert JoinReport().dropped == 0


def test_join_report_is_frozen(square_wards, scores_ab):
    _, report = attribute_join(square_wards, scores_ab)

    with pytest.raises(AttributeError):
        report.dropped_boundaries = ()
    assert isinstance(report.dropped_boundaries, tuple)


def test_join_ignores_missing_names(square_wards):
    wards = square_wards.copy()
    wards.loc[2, "Name"] = None
    scores = pd.DataFrame({"Ward": ["A", None], "gap_C1": [1.0, 2.0]})

    joined, report = attribute_join(wards, scores)

    assert joined["Name"].tolist() == ["A"]
    assert report.dropped_boundaries == ("B",)
    assert report.dropped_scores == ()
    assert len(joined) + report.dropped == len(set(wards["Name"].dropna()) | set(scores["Ward"].dropna()))


# CRS
def test_report_crs(square_wards):
    assert report_crs(square_wards) == 27700
    assert report_crs(without_crs(square_wards)) is None


def test_reproject_to_same_crs_is_idempotent(square_wards):
    same = reproject(square_wards, 27700)

    assert same is not square_wards
    assert same.geom_equals_exact(square_wards, tolerance=1e-9).all()


def test_reproject_is_pure(square_wards):
    before = square_wards.copy()

    wgs84 = reproject(square_wards, 4326)

    assert report_crs(wgs84) == 4326
    assert report_crs(square_wards) == 27700
    assert square_wards.geom_equals_exact(before, tolerance=0).all()
    pd.testing.assert_frame_equal(wgs84.drop(columns="geometry"), before.drop(columns="geometry"))
    minx, miny, maxx, maxy = wgs84.total_bounds
    assert -4 < minx < maxx < -2
    assert 55 < miny < maxy < 57


def test_reproject_round_trip(square_wards):
    back = reproject(reproject(square_wards, 4326), 27700)
    assert back.geom_equals_exact(square_wards, tolerance=1e-3).all()


def test_reproject_requires_crs(square_wards):
    with pytest.raises(ValueError):
        reproject(without_crs(square_wards), 4326)


# Geometry repair
def test_repair_bowtie():
    bowtie = Polygon([(0, 0), (1, 1), (1, 0), (0, 1), (0, 0)])
    gdf = gpd.GeoDataFrame({"Name": ["Bow"]}, geometry=[bowtie], crs=27700)
    assert not gdf.is_valid.iloc[0]

    repaired = repair_geometries(gdf)

    assert repaired.is_valid.all()
    assert repaired.geometry.iloc[0].area == pytest.approx(0.5)
    # Input left alone
    assert not gdf.is_valid.iloc[0]


def test_repair_leaves_valid_geometry(square_wards):
    repaired = repair_geometries(square_wards)
    assert repaired.geom_equals_exact(square_wards, tolerance=0).all()


def test_repair_failure_raises():
    gdf = gpd.GeoDataFrame({"Name": ["Nothing"]}, geometry=[Polygon()], crs=27700)

    with pytest.raises(InvalidGeometry, match="Nothing"):
        repair_geometries(gdf)


# Point in polygon
def test_interior_points_each_land_in_one_polygon(square_wards):
    points = sample_points(square_wards, per_polygon=20, seed=0)

    located = point_in_polygon_join(points, square_wards)

    assert len(located) == 60
    assert located.index.is_unique
    assert located["Name"].notna().all()
    assert (located["source"] == located["Name"]).all()


def test_point_outside_gets_no_match(square_wards):
    points = gpd.GeoDataFrame({"label": ["far"]}, geometry=[Point(0, 0)], crs=27700)

    located = point_in_polygon_join(points, square_wards)

    assert len(located) == 1
    assert pd.isna(located["Name"].iloc[0])
    assert pd.isna(located["polygon_index"].iloc[0])


def test_shared_boundary_goes_to_first_polygon(square_wards):
    points = gpd.GeoDataFrame({"label": ["edge"]}, geometry=[Point(326000, 673500)], crs=27700)

    forward = point_in_polygon_join(points, square_wards)
    reverse = point_in_polygon_join(points, square_wards.iloc[::-1])

    assert forward["Name"].tolist() == ["A"]
    assert reverse["Name"].tolist() == ["B"]


def test_shared_boundary_point_lies_on_both_wards(square_wards):
    point = shared_boundary_point(square_wards, position=0)

    assert point.x == pytest.approx(326000)
    assert square_wards.geometry.iloc[0].touches(point)
    assert square_wards.geometry.iloc[1].touches(point)
    located = point_in_polygon_join(gpd.GeoDataFrame(geometry=[point], crs=27700), square_wards)
    assert located["Name"].tolist() == ["A"]


def test_shared_boundary_point_needs_a_neighbour(square_wards):
    assert shared_boundary_point(square_wards.iloc[[0, 2]], position=0) is None


def test_points_are_reprojected_to_polygon_crs(square_wards):
    centre = gpd.GeoSeries([Point(325500, 673500)], crs=27700).to_crs(4326)
    points = gpd.GeoDataFrame({"label": ["inside A"]}, geometry=centre.values, crs=4326)

    located = point_in_polygon_join(points, square_wards)

    assert located["Name"].tolist() == ["A"]
    assert located.crs == square_wards.crs


def test_sample_points_count_and_source(square_wards):
    points = sample_points(square_wards, per_polygon=4, seed=1)

    assert len(points) == 12
    assert points["source"].value_counts().to_dict() == {"A": 4, "B": 4, "C": 4}
    assert points.crs == square_wards.crs


# Shipped sample
def test_sample_data_pipeline():
    wards = repair_geometries(read_ward_boundaries())
    scores = calculate_equality_scores(read_nssec_counts())

    joined, report = attribute_join(wards, scores)

    assert report.dropped_boundaries == ("Dalkeith",)
    assert report.dropped_scores == ("Leith Walk",)
    assert len(joined) == len(wards) - 1
    assert joined.is_valid.all()
