"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

MAX_DAYS_PER_DATE = Decimal("1.0")
ALLOWED_TIME_SPENT = (Decimal("0.5"), Decimal("1.0"))

COMPLIANCE_WEEKDAYS = 5
RECENT_SUBMISSION_DAYS = 7

DEFAULT_PROJECT_CACHE_SECONDS = 300
DEFAULT_MIRROR_WORKERS = 2

DEFAULT_PROJECTS = ("Internal R&D", "Client A", "Client B", "Marketing")
