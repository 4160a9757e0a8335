"""Environment configuration for the mediation API."""
import os
from dotenv import load_dotenv

# Load environment variables from a local .env file when present
load_dotenv()

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Database
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./mediator_dev.db")

# Identity provider (tokens are issued elsewhere, we only verify them)
AUTH_SECRET = os.environ.get("AUTH_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")

# Invites
APP_BASE_URL = os.environ.get("APP_BASE_URL", "http://localhost:3000")
INVITE_EXPIRY_HOURS = int(os.environ.get("INVITE_EXPIRY_HOURS", "24"))

# Mediation model (Cohere)
COHERE_API_KEY = os.environ.get("COHERE_API_KEY")
COHERE_MODEL = os.environ.get("COHERE_MODEL", "command-r-plus")
COHERE_SAFETY_MODEL = os.environ.get("COHERE_SAFETY_MODEL", "command-r")
COHERE_TEMPERATURE = float(os.environ.get("COHERE_TEMPERATURE", "0.7"))

# Real-time broadcast (Dapr pub/sub)
REALTIME_ENABLED = os.environ.get("REALTIME_ENABLED", "false").lower() in ("1", "true", "yes")
DAPR_PUBSUB_NAME = os.environ.get("DAPR_PUBSUB_NAME", "session-pubsub")

# CORS
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
