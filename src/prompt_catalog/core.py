import logging
import time
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path

from prompt_catalog import build, config, loader
from prompt_catalog.cache import ContentCache
from prompt_catalog.definitions import default_definitions, resolve_definitions
from prompt_catalog.models import (
    ContentDefinitions,
    ContentFilter,
    ContentIndex,
    FileTreeItem,
    StatsResponse,
)

logger = logging.getLogger(__name__)

TREE_KEY = "content-tree"
DEFINITIONS_KEY = "definitions"
FILE_KEY_PREFIX = "file:"


@lru_cache
def get_cache() -> ContentCache:
    return ContentCache(default_ttl=config.get_config().cache.cache_ttl)


def _content_dir() -> Path:
    return config.get_config().content.content_dir


def get_definitions() -> ContentDefinitions:
    cache = get_cache()
    definitions = cache.get(DEFINITIONS_KEY)
    if definitions is not None:
        return definitions

    try:
        definitions = resolve_definitions(_content_dir())
    except Exception:
        logger.exception("Error loading definitions")
        return default_definitions()

    cache.set(DEFINITIONS_KEY, definitions)
    return definitions


def get_content_tree() -> list[FileTreeItem]:
    cache = get_cache()
    tree = cache.get(TREE_KEY)
    if tree is not None:
        return tree

    t0 = time.monotonic()
    try:
        tree = loader.load_content_tree(_content_dir(), loader.default_options(), get_definitions())
    except Exception:
        logger.exception("Error loading content tree")
        return []
    logger.info(f"Loaded content tree in {time.monotonic() - t0:.2f}s")

    cache.set(TREE_KEY, tree)
    return tree


def get_filtered_content(category: str) -> list[FileTreeItem]:
    tree = get_content_tree()
    if category == config.ALL_TAB:
        return tree
    return loader.filter_file_tree(tree, ContentFilter(tags=[category]))


def get_content_stats() -> StatsResponse:
    stats = build.compute_stats(get_content_tree())
    return StatsResponse(**stats.model_dump(), definitions=get_definitions())


def search(query: str) -> list[FileTreeItem]:
    results = loader.search_content(get_content_tree(), query)
    logger.info(f"Search '{query}': {len(results)} matches")
    return results


def get_file_content(path: str) -> str:
    cache = get_cache()
    key = FILE_KEY_PREFIX + path
    content = cache.get(key)
    if content is None:
        content = loader.get_file_content(_content_dir(), path)
        cache.set(key, content)
    return content


def build_content_index() -> ContentIndex:
    try:
        return build.generate_content_index(_content_dir())
    except Exception:
        logger.exception("Error generating content index")
        return ContentIndex(
            files=get_content_tree(),
            definitions=get_definitions(),
            last_updated=datetime.now(timezone.utc),
            total_files=0,
            categories={},
            tags={},
        )


def reload() -> None:
    get_cache().clear()
    logger.info("Cleared content cache")
