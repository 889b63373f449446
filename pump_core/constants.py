"""Constants for the pump_core package."""

# Persisted key-value store keys
LOGS_KEY = "logs"
PROFILE_KEY = "profile"

# Wire encoding of an unset reps/weight field
UNSET = ""

# Default configuration values
DEFAULT_CONFIG_PATH = "~/.config/pump_tracker/config.yaml"
DEFAULT_DATA_DIR = "~/.local/share/pump_tracker"
DEFAULT_LOG_LEVEL = "INFO"
DATA_DIR_ENV_VAR = "PUMP_DATA_DIR"

# Export
DEFAULT_EXPORT_FILENAME = "dumbbell-tracker-data.json"
DEFAULT_EXPORT_INDENT = 2

# Adherence: three sessions per week over a sliding four-week window
ADHERENCE_WINDOW_DAYS = 28
SESSIONS_PER_WEEK = 3
EXPECTED_SESSIONS = SESSIONS_PER_WEEK * (ADHERENCE_WINDOW_DAYS // 7)

# Rest timer defaults in seconds
DEFAULT_MAIN_REST_SECONDS = 90
DEFAULT_ACCESSORY_REST_SECONDS = 60

RECENT_LOGS_LIMIT = 6
LOG_ID_LENGTH = 8
