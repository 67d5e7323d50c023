# station_finder/config.py
from dotenv import load_dotenv
import os

load_dotenv()

# API Keys
GOOGLE_PLACES_API_KEY = os.getenv("GOOGLE_PLACES_API_KEY")
SERPAPI_API_KEY = os.getenv("SERPAPI_API_KEY")
MAPBOX_ACCESS_TOKEN = os.getenv("MAPBOX_ACCESS_TOKEN")

# Runtime parameters
REQUESTS_PER_SECOND = 10
HTTP_TIMEOUT_SECONDS = 30
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Search policy
MAX_SEARCH_RADIUS_KM = 20
DEFAULT_RADIUS_METERS = 20000
DEFAULT_RESULT_LIMIT = 20
MATRIX_BATCH_SIZE = 24  # Mapbox matrix allows 25 coordinates, one is the origin
PHONE_MATCH_THRESHOLD = 60

# Fixed pauses between sequential upstream calls (seconds)
QUERY_DELAY_SECONDS = 0.5
BATCH_DELAY_SECONDS = 0.2
PHONE_LOOKUP_DELAY_SECONDS = 0.1

# Proximity scoring
TIME_WEIGHT = 0.4
DISTANCE_WEIGHT = 0.6
MAX_SCORED_DISTANCE_KM = 50
MAX_SCORED_TIME_MINUTES = 60
ASSUMED_SPEED_KMH = 40

# URLs
PLACES_BASE_URL = "https://maps.googleapis.com/maps/api/place"
SERPAPI_URL = "https://serpapi.com/search.json"
MAPBOX_MATRIX_URL = "https://api.mapbox.com/directions-matrix/v1/mapbox/driving"

# Locale tables (JSON). Empty means the packaged default.
LOCALE_TABLES_PATH = os.getenv("LOCALE_TABLES_PATH")

# File names
INPUT_CSV = "search_origins.csv"
OUTPUT_CSV = "fire_stations.csv"
