import logging
import math
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path

from prompt_catalog import config, loader
from prompt_catalog.definitions import resolve_definitions
from prompt_catalog.models import (
    ContentDefinitions,
    ContentFilter,
    ContentIndex,
    ContentStats,
    FileTreeItem,
    StaticContentData,
)

logger = logging.getLogger(__name__)


def compute_stats(tree: list[FileTreeItem]) -> ContentStats:
    total = 0
    parsed = 0
    category_count: Counter[str] = Counter()
    tag_count: Counter[str] = Counter()

    for node in loader.iter_files(tree):
        total += 1
        # a file counts as parsed when any frontmatter survived, recovered or not
        if node.frontmatter:
            parsed += 1
        tag_count.update(node.tags)
        category = (node.frontmatter or {}).get("category")
        if category:
            category_count[str(category)] += 1

    # half-up rounding, not banker's
    rate = math.floor(parsed * 100 / total + 0.5) if total else 0
    return ContentStats(
        total_files=total,
        parsed_files=parsed,
        failed_files=total - parsed,
        parse_success_rate=rate,
        total_categories=len(category_count),
        total_tags=len(tag_count),
        category_count=dict(category_count),
        tag_count=dict(tag_count),
    )


def collect_content_map(tree: list[FileTreeItem]) -> dict[str, str]:
    return {node.path: node.content for node in loader.iter_files(tree) if node.content}


def strip_content(tree: list[FileTreeItem]) -> list[FileTreeItem]:
    stripped = []
    for node in tree:
        update: dict = {"content": None}
        if node.children is not None:
            update["children"] = strip_content(node.children)
        stripped.append(node.model_copy(update=update))
    return stripped


def generate_static_content_data(
    content_dir: Path | None = None,
    definitions: ContentDefinitions | None = None,
) -> StaticContentData:
    root = Path(content_dir or config.get_config().content.content_dir)
    logger.info(f"Generating static content data from {root}")

    if definitions is None:
        definitions = resolve_definitions(root)
    options = loader.default_options().model_copy(update={"include_content": True})
    tree = loader.load_content_tree(root, options, definitions)

    content_map = collect_content_map(tree)
    stats = compute_stats(tree)

    filtered = {config.ALL_TAB: tree}
    for key in definitions.categories:
        if key == config.ALL_TAB:
            logger.warning(f"Category '{key}' clashes with the unfiltered tab, skipping it")
            continue
        filtered[key] = loader.filter_file_tree(tree, ContentFilter(tags=[key]))

    logger.info(f"Generated content data: {stats.total_files} files, {len(content_map)} content entries")
    logger.info(
        f"Parsing health: {stats.parsed_files}/{stats.total_files} successful ({stats.parse_success_rate}%)"
    )
    if stats.failed_files:
        logger.warning(f"{stats.failed_files} files had no usable frontmatter")

    return StaticContentData(
        content_tree=tree,
        definitions=definitions,
        content_map=content_map,
        stats=stats,
        filtered_content=filtered,
    )


def save_static_content_data(data: StaticContentData, output_path: Path | None = None) -> Path:
    path = Path(output_path or config.get_config().build.output_path)

    # bodies live in content_map only
    output = data.model_copy(
        update={
            "content_tree": strip_content(data.content_tree),
            "filtered_content": {key: strip_content(items) for key, items in data.filtered_content.items()},
        }
    )

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(output.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
    logger.info(f"Saved content data to: {path}")
    return path


def generate_content_index(content_dir: Path | None = None) -> ContentIndex:
    root = Path(content_dir or config.get_config().content.content_dir)
    definitions = resolve_definitions(root)
    tree = loader.load_content_tree(root, loader.default_options(), definitions)
    stats = compute_stats(tree)
    return ContentIndex(
        files=tree,
        definitions=definitions,
        last_updated=datetime.now(timezone.utc),
        total_files=stats.total_files,
        categories=stats.category_count,
        tags=stats.tag_count,
    )
