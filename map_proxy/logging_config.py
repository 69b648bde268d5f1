import logging
import json
from datetime import datetime, timezone
from map_proxy.config import ENVIRONMENT, LOG_LEVEL, SERVICE_NAME

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL.upper())
)
logger = logging.getLogger("map_proxy")

def log_structured(message: str, level: str = "INFO", **kwargs):
    log_data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": ENVIRONMENT,
        "service": SERVICE_NAME,
        "message": message,
        **kwargs
    }
    getattr(logger, level.lower())(json.dumps(log_data, default=str))
