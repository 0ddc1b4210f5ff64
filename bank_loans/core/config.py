import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# .env sits in the project root for dev runs and next to the executable when frozen
if getattr(sys, "frozen", False):
    BASE_DIR = Path(sys.executable).parent
else:
    BASE_DIR = Path(__file__).resolve().parents[2]

load_dotenv(dotenv_path=BASE_DIR / ".env")

JWT_SECRET = os.getenv("JWT_SECRET", "change-me-bank-loans-dev-signing-key")
JWT_ALGO = os.getenv("JWT_ALGO", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "standard")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:8080,http://localhost:8081,http://127.0.0.1:8080,http://127.0.0.1:8081",
    ).split(",")
    if origin.strip()
]

DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))

# startup seed (head office + first director)
SEED_BRANCH_CODE = os.getenv("SEED_BRANCH_CODE", "HO")
SEED_BRANCH_ADDRESS = os.getenv("SEED_BRANCH_ADDRESS", "Head office")
SEED_DIRECTOR_NAME = os.getenv("SEED_DIRECTOR_NAME", "Director")
SEED_DIRECTOR_EMAIL = os.getenv("SEED_DIRECTOR_EMAIL", "director@bank.local")
# change on first deploy; the director can then register everyone else
SEED_DIRECTOR_PASSWORD = os.getenv("SEED_DIRECTOR_PASSWORD", "ChangeMe123")

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "5001"))
