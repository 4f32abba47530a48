from config.loader import get_config_loader

# Get the config loader instance, every name below is read from CERTDESK_<NAME>
config = get_config_loader()

# Logging
LOG_LEVEL = config.get_choice("LOG_LEVEL", "info", ("debug", "info", "warning", "error", "critical"))
DEBUG_LOG_FILE = config.get_path("DEBUG_LOG_FILE", "certdesk_debug.log")

# Backend API (same default as the dashboard's VITE_API_URL)
API_URL = config.get_url("API_URL", "http://localhost:5000/api")

# Timeout configuration
# Connection timeout: Time to establish TCP connection
CONNECT_TIMEOUT = config.get_timeout("CONNECT_TIMEOUT", 10.0)
# Request timeout: Total timeout for a single request, a timed-out request
# is a transport failure and never enters the refresh protocol
REQUEST_TIMEOUT = config.get_timeout("REQUEST_TIMEOUT", 30.0)

# Session storage
SESSION_FILE = config.get_path("SESSION_FILE", "~/.certdesk/session.json")
