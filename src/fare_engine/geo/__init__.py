from .distance import EARTH_RADIUS_MILES, haversine_miles, path_miles, validate_point

__all__ = ["EARTH_RADIUS_MILES", "haversine_miles", "path_miles", "validate_point"]
