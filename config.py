import os

SECRET_KEY = os.getenv("SECRET_KEY")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Calculator: how long the display keeps its highlight after a result (ms)
CALCULATOR_PULSE_MS = int(os.getenv("CALCULATOR_PULSE_MS", "300"))

# Calculator state only needs to live for the browser session
SESSION_PERMANENT = False
SESSION_COOKIE_SAMESITE = "Lax"

# Jinja2 whitespace control - prevents unwanted line breaks in rendered HTML
JINJA2_TRIM_BLOCKS = True
JINJA2_LSTRIP_BLOCKS = True
