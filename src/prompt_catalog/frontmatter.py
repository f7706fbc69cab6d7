import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, NamedTuple

import yaml

from prompt_catalog import config

logger = logging.getLogger(__name__)


class ParsedMarkdown(NamedTuple):
    content: str
    frontmatter: dict[str, Any]


_FRONTMATTER_BLOCK = re.compile(r"\A---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n|\Z)", re.DOTALL)
_RECOVERY_BLOCK = re.compile(r"\A---\n(.*?)\n---\n(.*)\Z", re.DOTALL)
_SIMPLE_KEY_VALUE = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)\s*:\s*(.*)$")
_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")


def fallback_name(path: Path | str) -> str:
    name = Path(path).name
    return name[:-3] if name.endswith(".md") and len(name) > 3 else name


def _normalize(value: Any) -> Any:
    # YAML timestamps and sets are not JSON serializable
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_normalize(v) for v in value), key=str)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _parse_standard(text: str) -> ParsedMarkdown:
    m = _FRONTMATTER_BLOCK.match(text)
    if not m:
        return ParsedMarkdown(text, {})

    data = yaml.safe_load(m.group(1) or "")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"frontmatter is a {type(data).__name__}, not a mapping")
    return ParsedMarkdown(text[m.end():], _normalize(data))


def _recover(text: str) -> ParsedMarkdown | None:
    m = _RECOVERY_BLOCK.match(text)
    if not m:
        return None

    raw_frontmatter, content = m.groups()
    frontmatter: dict[str, Any] = {}
    for line in raw_frontmatter.split("\n"):
        kv = _SIMPLE_KEY_VALUE.match(line)
        if not kv:
            continue
        key, value = kv.groups()
        # Skip values that look like HTML or escaped multiline text
        if ("<" not in value and "\\n" not in value) or key in config.ALWAYS_RECOVERED_KEYS:
            frontmatter[key] = _SURROUNDING_QUOTES.sub("", value)
    return ParsedMarkdown(content, frontmatter)


def parse_markdown(text: str, name: str, source: str = "<string>") -> ParsedMarkdown:
    """Split markdown into body and frontmatter, degrading gracefully.

    Tries a regular YAML parse first. When the YAML is broken, simple
    ``key: value`` lines are salvaged from the block. When even the block
    cannot be located, the whole text becomes the body and ``name`` is
    used as the only frontmatter field.
    """
    text = text.replace("\r\n", "\n")
    try:
        return _parse_standard(text)
    except yaml.YAMLError as exc:
        logger.warning(f"YAML parsing failed for {source}, attempting recovery: {exc}")

    recovered = _recover(text)
    if recovered is not None:
        return recovered

    logger.warning(f"Could not parse frontmatter for {source}, treating as plain content")
    return ParsedMarkdown(text, {"name": name})


def parse_markdown_file(path: Path) -> ParsedMarkdown:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.error(f"Error reading markdown file {path}: {exc}")
        return ParsedMarkdown("", {"name": fallback_name(path)})
    return parse_markdown(text, fallback_name(path), source=str(path))


def strip_frontmatter(text: str) -> str:
    text = text.replace("\r\n", "\n")
    m = _FRONTMATTER_BLOCK.match(text)
    return text[m.end():] if m else text
