import logging
from pathlib import Path

import yaml

from prompt_catalog import config
from prompt_catalog.models import CategoryDefinition, ContentDefinitions, TagDefinition

logger = logging.getLogger(__name__)


def default_definitions() -> ContentDefinitions:
    return ContentDefinitions(
        categories={
            "agents": CategoryDefinition(
                name="Agents",
                patterns=["**/agents/**", "**/.claude/agents/**"],
                default_tags=["agents"],
            ),
            "commands": CategoryDefinition(
                name="Commands",
                patterns=["**/commands/**", "**/.claude/commands/**", "**/*.command.*"],
                default_tags=["commands"],
            ),
            "prompts": CategoryDefinition(
                name="Prompts",
                patterns=["**/prompts/**", "**/claude/**", "**/*.prompt.*"],
                default_tags=["prompts"],
            ),
            "instructions": CategoryDefinition(
                name="Instructions",
                patterns=["**/instructions/**", "**/rules/**", "**/*.instructions.*"],
                default_tags=["instructions"],
            ),
        },
        tags={
            "agents": TagDefinition(name="Agents", description="AI agent configurations and prompts"),
            "commands": TagDefinition(name="Commands", description="Command definitions and workflows"),
            "prompts": TagDefinition(name="Prompts", description="Reusable prompt templates"),
            "instructions": TagDefinition(
                name="Instructions", description="Setup guides and configuration instructions"
            ),
        },
        patterns=[],
    )


def merge_definitions(base: ContentDefinitions, override: ContentDefinitions) -> ContentDefinitions:
    return ContentDefinitions(
        categories={**base.categories, **override.categories},
        tags={**base.tags, **override.tags},
        patterns=[*base.patterns, *override.patterns],
    )


def load_definitions(content_dir: Path, filename: str | None = None) -> ContentDefinitions:
    defaults = default_definitions()
    path = content_dir / (filename or config.get_config().content.definitions_file)
    if not path.is_file():
        return defaults

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"expected a mapping, got {type(raw).__name__}")
        loaded = ContentDefinitions.model_validate(
            {key: raw[key] for key in ("categories", "tags", "patterns") if raw.get(key) is not None}
        )
    except (OSError, yaml.YAMLError, ValueError) as exc:
        logger.warning(f"Failed to load {path}, using default definitions: {exc}")
        return defaults

    merged = merge_definitions(defaults, loaded)
    logger.info(
        f"Loaded definitions from {path}: {len(merged.categories)} categories, "
        f"{len(merged.tags)} tags, {len(merged.patterns)} custom patterns"
    )
    return merged


def resolve_definitions(content_dir: Path) -> ContentDefinitions:
    if config.get_config().content.use_definitions_file:
        return load_definitions(content_dir)
    return default_definitions()
