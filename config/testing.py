import os

SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": os.getenv("ROSTER_API_URL", "http://roster.test/api"),
    "timeout": 2.0,
    "token": "",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

GOOD_ATTENDANCE_PERCENTAGE = 90
MINIMUM_ATTENDANCE_PERCENTAGE = 75
