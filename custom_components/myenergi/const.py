"""Constants for the myenergi integration."""

DOMAIN = "myenergi"
MANUFACTURER = "myenergi"

CONF_HOST = "host"
CONF_SCAN_INTERVAL = "scan_interval"

# Defaults
DEFAULT_NAME = "myenergi"
DEFAULT_SCAN_INTERVAL = 60
MIN_SCAN_INTERVAL = 10

# API
API_HOST_TEMPLATE = "s{}.myenergi.net"
API_STATUS = "/cgi-jstatus-*"
API_ZAPPI_MODE = "/cgi-zappi-mode-Z{serial}-{mode}-{boost}-{kwh}-{departure}"
API_ZAPPI_HISTORY_HOUR = "/cgi-jdayhour-Z{serial}-{day}"
API_ZAPPI_HISTORY_MINUTE = "/cgi-jday-Z{serial}-{day}"
API_ASN_HEADER = "x_myenergi-asn"
API_USER_AGENT = "curl/7.58.0"

# Update intervals
MAX_ATTEMPTS = 3
REQUEST_TIMEOUT_SECONDS = 15
UPDATE_TIMEOUT_SECONDS = 30
REFRESH_CACHE_SECONDS = 3

# Device types
DEVICE_ZAPPI = "zappi"
DEVICE_HARVI = "harvi"
DEVICE_EDDI = "eddi"
DEVICE_TYPES = (DEVICE_ZAPPI, DEVICE_HARVI, DEVICE_EDDI)

PLATFORMS = ["binary_sensor", "button", "select", "sensor"]

# Services
SERVICE_SET_BOOST = "set_boost"
SERVICE_GET_HISTORY = "get_history"
ATTR_SERIAL_NUMBER = "serial_number"
ATTR_BOOST_MODE = "boost_mode"
ATTR_KWH = "kwh"
ATTR_DEPARTURE_TIME = "departure_time"
ATTR_DATE = "date"
ATTR_RESOLUTION = "resolution"
