import os

# =========================
# ENVIRONMENT CONFIG
# =========================
SERVICE_NAME = os.getenv("SERVICE_NAME", "map-proxy")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "30"))

# Caller tokens
SECRET_KEY = os.getenv("JWT_SECRET", "changeme")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Named properties (token services, map configuration file)
MAP_PROPERTIES_FILE = os.getenv("MAP_PROPERTIES_FILE", "map.properties")
DEFAULT_SERVICE_NAME = "map.service"
