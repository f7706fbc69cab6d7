from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_EXCLUDE_PATTERNS = [".DS_Store", ".git", "node_modules"]


class ContentConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    content_dir: Path = Path("content")
    definitions_file: str = "definitions.yaml"
    use_definitions_file: bool = True
    exclude_patterns: list[str] = DEFAULT_EXCLUDE_PATTERNS


class BuildConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    output_path: Path = Path("public") / "content-data.json"


class CacheConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    cache_ttl: float = 300.0  # seconds


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    content: ContentConfig = ContentConfig()
    build: BuildConfig = BuildConfig()
    cache: CacheConfig = CacheConfig()


@lru_cache
def get_config() -> Config:
    return Config(content=ContentConfig(), build=BuildConfig(), cache=CacheConfig())


MARKDOWN_EXTENSIONS = (".md", ".markdown")

# Keys the frontmatter recovery pass keeps even when the value looks complex
ALWAYS_RECOVERED_KEYS = {"name", "color", "tools"}

ALL_TAB = "all"
