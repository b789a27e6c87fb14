"""Configuration management for the meal calendar service."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# TheMealDB (free test key '1' needs no account)
MEALDB_BASE_URL: Final[str] = os.getenv('MEALDB_BASE_URL', 'https://www.themealdb.com/api/json/v1/1')
MEALDB_TIMEOUT: Final[float] = float(os.getenv('MEALDB_TIMEOUT', '10'))

# Cached recipes older than this are eligible for re-normalization
RECIPE_STALE_HOURS: Final[int] = int(os.getenv('RECIPE_STALE_HOURS', '24'))

# How many times a plan mutation is replayed after a version conflict
SAVE_RETRIES: Final[int] = int(os.getenv('SAVE_RETRIES', '3'))

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('MEALCAL_DATA_DIR', str(BASE_DIR / 'data')))
