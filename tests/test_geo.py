import math

from resource_locator.geo import distance_miles, haversine_km, miles_to_meters


def test_one_degree_latitude_at_equator_is_about_69_miles():
    d = distance_miles({"lat": 0.0, "lng": 0.0}, {"lat": 1.0, "lng": 0.0})
    assert abs(d - 69.0) <= 0.5


def test_distance_is_symmetric_and_zero_for_same_point():
    a = {"lat": 39.0, "lng": -98.0}
    b = {"lat": 39.05, "lng": -98.02}
    assert distance_miles(a, a) == 0.0
    assert math.isclose(distance_miles(a, b), distance_miles(b, a))


def test_haversine_km_matches_miles_ratio():
    km = haversine_km(52.23, 21.01, 52.30, 20.95)
    miles = distance_miles({"lat": 52.23, "lng": 21.01}, {"lat": 52.30, "lng": 20.95})
    assert math.isclose(km / miles, 6371.0 / 3959.0, rel_tol=1e-9)


def test_nan_propagates():
    d = distance_miles({"lat": float("nan"), "lng": 0.0}, {"lat": 1.0, "lng": 0.0})
    assert math.isnan(d)


def test_miles_to_meters():
    assert math.isclose(miles_to_meters(10), 16093.4)
