import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_CONFIG = {
    "base_url": os.getenv("ROSTER_API_URL", "http://localhost:5173/api"),
    "timeout": float(os.getenv("ROSTER_API_TIMEOUT", "10")),
    "token": os.getenv("ROSTER_API_TOKEN", ""),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Attendance percentage bands (good >= GOOD, warning >= MINIMUM, shortage below)
GOOD_ATTENDANCE_PERCENTAGE = int(os.getenv("GOOD_ATTENDANCE_PERCENTAGE", "90"))
MINIMUM_ATTENDANCE_PERCENTAGE = int(os.getenv("MINIMUM_ATTENDANCE_PERCENTAGE", "75"))
