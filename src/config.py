# config.py

# === CONFIG ===
# Every stage that needs a maximum age reads this one value.
RETENTION_DAYS = 15

OUTPUT_PATH = "events.csv"  # relative to the working directory

# === INPUT SCHEMA ===
TIMESTAMP_COLUMN = "Date/Time"
DESCRIPTION_COLUMN = "Event Description"
STATUS_COLUMN = "Status"
REQUIRED_COLUMNS = (TIMESTAMP_COLUMN, STATUS_COLUMN)

STATUS_FLAG = "Blocked"

# format written by the firewall exporter; anything else goes through dateutil
TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"

# === FILE SELECTION ===
CANDIDATE_PATTERNS = ("*.csv", "fwddmp.log.tmp*")
CHUNK_ROWS = 5000

# === DESCRIPTION CLEANING ===
# (pattern, replacement), applied in order until the text stops changing.
CLEANING_RULES = [
    (r"^\[.*?>\s*", ""),                           # exporter prefix "[fw01 ...] >"
    (r"\b(?:ID|Id|id)\s*[=:#]\s*\d+\b", ""),       # embedded numeric IDs
    (r"\[[^\[\]]*\]", ""),                         # bracketed codes
    (r"\s+", " "),
    (r"^\s+|\s+$", ""),
]
