"""
Card Store Constants

Names and sizes shared by the configuration and database modules.
"""


# ---- Application ----

APP_NAME = "repeat"  # Used for the per-user data directory


# ---- Storage ----

TABLE_NAME = "cards"
DB_FILENAME = "cards.db"


# ---- Connection Pool ----

# Small fixed pool for a single-process embedded workload.
# Checkouts beyond this wait for a connection instead of opening more.
POOL_SIZE = 5
