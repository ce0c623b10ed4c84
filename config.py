from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings


class Env(Enum):
    local = "local"
    dev = "dev"
    prod = "prod"


class Config(BaseSettings):
    env: Env = Env.local
    log_level: str = "INFO"
    db_url: str = "sqlite+aiosqlite:///planner.db"

    cache_dir: Path = Path.home() / ".cache" / "RecipeCache"
    cache_memory_limit: int = 100
    # Raw keys are used as filenames unless this is set.
    cache_hash_filenames: bool = False
    search_ttl: float = 60 * 60
    detail_ttl: float = 60 * 60 * 24

    api_base_url: str = "https://api.spoonacular.com"
    spoonacular_api_key: str = ""
    api_timeout: float = 30
