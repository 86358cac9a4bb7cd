"""Service configuration read from the environment (and a local .env file)."""
import os

from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pizza.db")

# JWT Configuration
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 1440))

# Password hashing cost
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

# Bootstrap admin, created at startup when missing. Empty email disables it.
DEFAULT_ADMIN_NAME = os.getenv("DEFAULT_ADMIN_NAME", "pizza admin")
DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "a@jwt.com")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SERVICE_VERSION = os.getenv("SERVICE_VERSION", "1.0.0")
