import re
from functools import lru_cache
from typing import Any

from prompt_catalog.models import ContentDefinitions

_GLOB_TOKEN = re.compile(r"\*\*/|\*\*|\*|\?")


@lru_cache(maxsize=1024)
def pattern_to_regex(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    pos = 0
    for m in _GLOB_TOKEN.finditer(pattern):
        parts.append(re.escape(pattern[pos:m.start()]))
        token = m.group()
        if token == "**/":
            # zero or more whole directories
            parts.append("(?:.*/)?")
        elif token == "**":
            parts.append(".*")
        elif token == "*":
            parts.append("[^/]*")
        else:
            parts.append("[^/]")
        pos = m.end()
    parts.append(re.escape(pattern[pos:]))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE)


def matches_pattern(path: str, pattern: str) -> bool:
    return pattern_to_regex(pattern).match(path) is not None


def frontmatter_tags(frontmatter: dict[str, Any]) -> list[str]:
    tags = frontmatter.get("tags")
    if isinstance(tags, str):
        return [tags] if tags else []
    if isinstance(tags, list):
        return [str(t) for t in tags if t is not None and t != ""]
    return []


def apply_tags(
    relative_path: str,
    frontmatter: dict[str, Any],
    definitions: ContentDefinitions,
) -> list[str]:
    tags: dict[str, None] = {}

    for tag in frontmatter_tags(frontmatter):
        tags[tag] = None

    category = frontmatter.get("category")
    if category:
        tags[str(category)] = None

    for key, definition in definitions.categories.items():
        for pattern in definition.patterns:
            if matches_pattern(relative_path, pattern):
                for tag in definition.default_tags:
                    tags[tag] = None
                tags[key] = None

    for rule in definitions.patterns:
        if matches_pattern(relative_path, rule.pattern):
            for tag in rule.tags:
                tags[tag] = None
            if rule.category:
                tags[rule.category] = None

    return list(tags)
