"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000
DEFAULT_LOCATION_RADIUS = 100
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_CHURCH_TIMEZONE = "Africa/Nairobi"
# Floating-point slack when comparing a computed distance with a radius.
RADIUS_TOLERANCE_METERS = 1e-6
