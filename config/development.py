import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

GEOFENCE = {
    "INDOOR_LENIENCY_ENABLED": bool(int(os.getenv("INDOOR_LENIENCY_ENABLED", "1"))),
    "LOCATION_HISTORY_SIZE": int(os.getenv("LOCATION_HISTORY_SIZE", "10")),
    "LOCATION_HISTORY_MAX_AGE_MINUTES": int(os.getenv("LOCATION_HISTORY_MAX_AGE_MINUTES", "60")),
    "OFFSITE_CHECKOUT_DISTANCE_METERS": float(os.getenv("OFFSITE_CHECKOUT_DISTANCE_METERS", "500")),
    "DAY_END_CUTOFF": os.getenv("DAY_END_CUTOFF", "23:55"),
}

# None: department policies are read from the department_policies table.
DEPARTMENT_POLICIES = None
