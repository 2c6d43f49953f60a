"""Constants for the Sure Petcare integration."""

DOMAIN = "surepetcare"
MANUFACTURER = "Sure Petcare"

CONF_SCAN_INTERVAL = "scan_interval"
CONF_LOCATION_SCAN_INTERVAL = "location_scan_interval"

# Defaults
DEFAULT_NAME = "Sure Petcare"
DEFAULT_SCAN_INTERVAL = 300
DEFAULT_LOCATION_SCAN_INTERVAL = 30
MIN_SCAN_INTERVAL = 10

# API URLs
API_BASE_URL = "https://app.api.surehub.io/api"
API_LOGIN = "/auth/login"
API_TOPOLOGY = "/me/start"
API_PET_LOCATIONS = "/pet?with[]=position"
API_PET_POSITION = "/pet/{pet_id}/position"
API_USER_AGENT = "Mozilla/5.0 (Linux; Android 7.0; SM-G930F Build/NRD90M; wv)"

# Update intervals
REQUEST_TIMEOUT_SECONDS = 15
UPDATE_TIMEOUT_SECONDS = 30
REFRESH_CACHE_SECONDS = 3

# Object kinds
KIND_PET = "pet"
KIND_HOUSEHOLD = "household"
KIND_DEVICE = "device"

PLATFORMS = ["binary_sensor", "button", "select", "sensor"]

COORDINATOR_TOPOLOGY = "topology"
COORDINATOR_LOCATION = "location"
