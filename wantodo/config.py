"""Environment-driven settings for the Wantodo backend."""

import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./wantodo.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

# "sql" (default) or "json"
STORAGE_BACKEND = os.getenv("WANTODO_STORAGE", "sql").lower()
TASKS_FILE = os.getenv("WANTODO_TASKS_FILE", "tasks.json")

AUTH_SECRET = os.getenv("WANTODO_AUTH_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("WANTODO_JWT_ALGORITHM", "HS256")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
