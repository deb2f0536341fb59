"""Configuration management for the timetable viewer."""
import os
from typing import Final, Optional
from pathlib import Path

from dotenv import load_dotenv

from timetable.utilities.constants import DEFAULT_MAX_WEEK

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Schedule backend
SCHEDULE_API_BASE_URL: Final[str] = os.getenv('SCHEDULE_API_BASE_URL', 'http://localhost:8080/api')
SCHEDULE_API_TOKEN: Final[str] = os.getenv('SCHEDULE_API_TOKEN', '')
SCHEDULE_API_TIMEOUT: Final[float] = float(os.getenv('SCHEDULE_API_TIMEOUT', '10'))

# Layout / navigation
_layout_file = os.getenv('TIMETABLE_LAYOUT_FILE', '')
TIMETABLE_LAYOUT_FILE: Final[Optional[Path]] = Path(_layout_file) if _layout_file else None
MAX_WEEK: Final[int] = int(os.getenv('MAX_WEEK', str(DEFAULT_MAX_WEEK)))

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()
