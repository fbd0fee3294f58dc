import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./rentals.db")
RENTAL_TIMEZONE = os.getenv("RENTAL_TIMEZONE", "UTC")

GEOCODER_FAILURE_THRESHOLD = int(os.getenv("GEOCODER_FAILURE_THRESHOLD", "5"))
GEOCODER_RESET_TIMEOUT = float(os.getenv("GEOCODER_RESET_TIMEOUT", "60.0"))

PORT = int(os.getenv("PORT", "8060"))
