import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_DIR = Path(__file__).resolve().parent.parent.parent


def find_env_file(name: Optional[str] = None) -> Optional[Path]:
    """Resolve ``ENV_FILE`` against the working directory, then the project root."""
    name = name or os.getenv("ENV_FILE")
    if not name:
        return None
    candidate = Path(name).expanduser()
    if candidate.is_absolute():
        return candidate if candidate.exists() else None
    for base in (Path.cwd(), PROJECT_DIR):
        if (base / candidate).exists():
            return base / candidate
    return None


def load_env(name: Optional[str] = None) -> Optional[Path]:
    """Load the env file into ``os.environ`` without overriding set variables."""
    path = find_env_file(name)
    if path is not None:
        load_dotenv(path, override=False)
    return path
