import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "internship_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

GEOFENCE_TOLERANCE_METERS = 20.0
MAX_MOVEMENT_SPEED_KMH = 200.0

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
