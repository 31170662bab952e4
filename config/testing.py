import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

GEOFENCE = {
    "INDOOR_LENIENCY_ENABLED": True,
    "LOCATION_HISTORY_SIZE": 10,
    "LOCATION_HISTORY_MAX_AGE_MINUTES": 60,
    "OFFSITE_CHECKOUT_DISTANCE_METERS": 500,
    "DAY_END_CUTOFF": "23:55",
}

# Static policies so tests do not need a department_policies table.
DEPARTMENT_POLICIES = {
    "default": {
        "dept_name": "Default",
        "expected_check_in": "09:00",
        "expected_check_out": "18:00",
        "late_grace_minutes": 15,
        "overtime_threshold_minutes": 30,
    },
}
