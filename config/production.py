import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("ROSTER_API_URL", "http://localhost:8000/api"),
    "timeout": float(os.getenv("ROSTER_API_TIMEOUT", "10")),
    "token": os.getenv("ROSTER_API_TOKEN", ""),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

GOOD_ATTENDANCE_PERCENTAGE = int(os.getenv("GOOD_ATTENDANCE_PERCENTAGE", "90"))
MINIMUM_ATTENDANCE_PERCENTAGE = int(os.getenv("MINIMUM_ATTENDANCE_PERCENTAGE", "75"))
