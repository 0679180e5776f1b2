from datetime import timedelta
from decouple import config
from pathlib import Path

# Input / credentials
CSV_PATH = Path(config('CSV_PATH', default='photos.csv'))
GOOGLE_API_KEY = config('GOOGLE_API_KEY', default='')

# Enrichment pool
POOL_SIZE = config('POOL_SIZE', default=5, cast=int)
RATE_LIMIT = config('RATE_LIMIT', default=50, cast=int)  # requests per second
GEOCODER_TIMEOUT = config('GEOCODER_TIMEOUT', default=10, cast=float)
QUEUE_POLL_SECONDS = config('QUEUE_POLL_SECONDS', default=0.1, cast=float)

# Grouping
VISIT_WINDOW_HOURS = config('VISIT_WINDOW_HOURS', default=24, cast=int)
VISIT_WINDOW = timedelta(hours=VISIT_WINDOW_HOURS)

# Trip classification
TRIP_DAY_HOURS = 24
TRIP_WEEKEND_MAX_HOURS = 96

# Google only supports filtering reverse lookups by result type, not by
# address component type, so components are filtered after the fact.
RESULT_TYPES = ('locality',)
ACCEPTED_PLACE_TYPES = frozenset(
    {
        'country',
        'locality',
        'sublocality',
        'administrative_area_level_3',
        'administrative_area_level_2',
        'administrative_area_level_1',
    }
)

# Validation constants
MIN_VALID_LATITUDE = -90.0
MAX_VALID_LATITUDE = 90.0
MIN_VALID_LONGITUDE = -180.0
MAX_VALID_LONGITUDE = 180.0
