"""Geometry and text decision logic for drawing clean-up."""

from src.cad.duplicates import PlacementGroup, group_placements, pick_survivor, resolve_duplicates
from src.cad.height_marks import is_height_mark
from src.cad.points import distance_2d, point_in_box, points_near
from src.cad.text_search import filter_vertical_cluster, find_nearby_height_marks

__all__ = [
    "PlacementGroup",
    "distance_2d",
    "filter_vertical_cluster",
    "find_nearby_height_marks",
    "group_placements",
    "is_height_mark",
    "pick_survivor",
    "point_in_box",
    "points_near",
    "resolve_duplicates",
]
