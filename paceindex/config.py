"""
Pace Index Calculator - Configuration
Application-wide settings and pace rule constants
"""
import os

# =============================================
# App info
# =============================================
APP_NAME = "Pace Index Calculator"
APP_VERSION = "1.2.0"

# Branding modes (same table, different title)
BRAND_TITLES = {
    "OTR": "On The Run Pace Index",
    "UPREP": "UPrep Pace Index",
}
DEFAULT_BRAND = "OTR"

# =============================================
# Units
# =============================================
METERS_PER_MILE = 1609.344
SECONDS_PER_DAY = 86400

# Riegel exponent: T2 = T1 * (D2/D1) ** 1.06
RIEGEL_EXPONENT = 1.06

# Split/pace cells above this many seconds are taken as centiseconds
CENTISECOND_THRESHOLD = 2000

# =============================================
# Training pace rules (seconds per mile)
# =============================================
RECOVERY_OFFSET = 110       # 5k race pace + 1:50
STEADY_OFFSET_LOW = 60      # 5k race pace + 1:00
STEADY_OFFSET_HIGH = 75     # 5k race pace + 1:15
POWER_RUN_OFFSET = 30       # 2 mile race pace + :30

THRESHOLD_SPLITS = [400, 100]

# =============================================
# Distances
# =============================================
# Race distances in meters, in display order. 10k is derived, never stored.
RACE_DISTANCES = {
    "800": 800,
    "mile": METERS_PER_MILE,
    "2mile": METERS_PER_MILE * 2,
    "5k": 5000,
    "10k": 10000,
    "half": 21097.5,
    "marathon": 42195,
}

RACE_LABELS = {
    "800": "800",
    "mile": "Mile",
    "2mile": "2 Mile",
    "5k": "5K",
    "10k": "10K",
    "half": "Half Marathon",
    "marathon": "Marathon",
}

STORED_PREDICTIONS = ["800", "mile", "2mile", "5k", "half", "marathon"]
RACE_PACES = ["mile", "2mile", "5k"]

CV_REPEATS = [100, 400, 800, 1000, 1200, 1600]
FIVEK_REPEATS = [100, 400, 800, 1000, 1200, 1600]
TWO_MILE_REPEATS = [100, 200, 300, 400, 600]

# =============================================
# Data files
# =============================================
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = "data"
PACE_TABLE_FILE = "paces.json"
PACE_TABLE_PATH = os.path.join(BASE_DIR, DATA_DIR, PACE_TABLE_FILE)

COLUMN_MAP_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "column_maps.yaml")
DEFAULT_LAYOUT = "pace_overview"

# =============================================
# Query defaults
# =============================================
DEFAULT_PACE_INDEX = 61
DEFAULT_DISTANCE = "5k"
