import os

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "supersecret")
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    LOG_DIR = os.getenv("LOG_DIR", os.path.join(BASE_DIR, "logs"))
    LOG_FILENAME = os.getenv("LOG_FILENAME", "location_console.log")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "")

    # Number of names returned alongside the tree in preview responses.
    LOCATION_PATTERN_PREVIEW_LIMIT = int(os.getenv("LOCATION_PATTERN_PREVIEW_LIMIT", 10))
    # Requests expanding to more names than this are rejected before expansion.
    LOCATION_PATTERN_MAX_NAMES = int(os.getenv("LOCATION_PATTERN_MAX_NAMES", 5000))

    # Bounds of the basic aisle form (numbered columns, lettered rows A-Z).
    LOCATION_PATTERN_MAX_COLUMNS = int(os.getenv("LOCATION_PATTERN_MAX_COLUMNS", 99))
    LOCATION_PATTERN_MAX_ROWS = int(os.getenv("LOCATION_PATTERN_MAX_ROWS", 26))
    AISLE_FORM_MAX_ITEMS = int(os.getenv("AISLE_FORM_MAX_ITEMS", 20))
