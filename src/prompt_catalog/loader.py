import logging
import stat
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path

from prompt_catalog import config, frontmatter, tagging
from prompt_catalog.definitions import resolve_definitions
from prompt_catalog.models import ContentDefinitions, ContentFilter, FileTreeItem, LoadContentOptions

logger = logging.getLogger(__name__)


class ContentError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def is_markdown(name: str) -> bool:
    return name.lower().endswith(config.MARKDOWN_EXTENSIONS)


def is_excluded(name: str, exclude_patterns: list[str]) -> bool:
    return any(pattern in name for pattern in exclude_patterns)


def _sort_key(item: FileTreeItem) -> tuple[bool, str, str]:
    # folders first, then case-insensitive by name
    return (item.type != "folder", item.name.casefold(), item.name)


def default_options() -> LoadContentOptions:
    return LoadContentOptions(exclude_patterns=config.get_config().content.exclude_patterns)


class _TreeBuilder:
    def __init__(
        self,
        root: Path,
        options: LoadContentOptions,
        definitions: ContentDefinitions | None,
    ):
        self.root = root
        self.options = options
        self.definitions = definitions
        self._seen_dirs: set[tuple[int, int]] = set()

    def build(self, path: Path) -> FileTreeItem | None:
        name = path.name
        if is_excluded(name, self.options.exclude_patterns):
            return None

        try:
            st = path.stat()
        except OSError as exc:
            logger.error(f"Error reading {path}: {exc}")
            return None

        relative = path.relative_to(self.root).as_posix()
        modified = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)

        if stat.S_ISDIR(st.st_mode):
            return FileTreeItem(
                name=name,
                type="folder",
                path=relative,
                children=self.children(path, (st.st_dev, st.st_ino)),
                tags=[],
                last_modified=modified,
            )

        content = None
        meta: dict = {}
        if self.options.parse_markdown and is_markdown(name):
            parsed = frontmatter.parse_markdown_file(path)
            meta = parsed.frontmatter
            if self.options.include_content:
                content = parsed.content

        tags: list[str] = []
        if self.options.apply_tags and self.definitions is not None:
            tags = tagging.apply_tags(relative, meta, self.definitions)

        return FileTreeItem(
            name=name,
            type="file",
            path=relative,
            content=content,
            frontmatter=meta,
            tags=tags,
            size=st.st_size,
            last_modified=modified,
        )

    def children(self, directory: Path, identity: tuple[int, int]) -> list[FileTreeItem]:
        if identity in self._seen_dirs:
            logger.warning(f"Skipping already visited directory {directory}")
            return []
        self._seen_dirs.add(identity)

        try:
            entries = list(directory.iterdir())
        except OSError as exc:
            logger.error(f"Error reading directory {directory}: {exc}")
            return []

        nodes = [node for node in map(self.build, entries) if node is not None]
        nodes.sort(key=_sort_key)
        return nodes


def load_content_tree(
    content_dir: Path | None = None,
    options: LoadContentOptions | None = None,
    definitions: ContentDefinitions | None = None,
) -> list[FileTreeItem]:
    root = Path(content_dir or config.get_config().content.content_dir)
    options = options or default_options()

    if not root.is_dir():
        logger.warning(f"Content directory does not exist: {root}")
        return []

    if options.apply_tags and definitions is None:
        definitions = resolve_definitions(root)

    builder = _TreeBuilder(root, options, definitions)
    st = root.stat()
    return builder.children(root, (st.st_dev, st.st_ino))


def iter_files(tree: list[FileTreeItem]) -> Iterator[FileTreeItem]:
    for node in tree:
        if node.is_file:
            yield node
        elif node.children:
            yield from iter_files(node.children)


def _matches_filter(node: FileTreeItem, content_filter: ContentFilter) -> bool:
    meta = node.frontmatter or {}

    if content_filter.tags:
        own_tags = set(node.tags) | set(tagging.frontmatter_tags(meta))
        if not any(tag in own_tags for tag in content_filter.tags):
            return False

    if content_filter.category:
        if content_filter.category not in node.tags and meta.get("category") != content_filter.category:
            return False

    return True


def filter_file_tree(tree: list[FileTreeItem], content_filter: ContentFilter) -> list[FileTreeItem]:
    result = []
    for node in tree:
        if node.is_file:
            if _matches_filter(node, content_filter):
                result.append(node)
            continue

        children = filter_file_tree(node.children or [], content_filter)
        # folders only survive with at least one matching descendant
        if children:
            result.append(node.model_copy(update={"children": children}))
    return result


def search_content(tree: list[FileTreeItem], query: str) -> list[FileTreeItem]:
    needle = query.strip().lower()
    if not needle:
        return []

    results = []
    for node in iter_files(tree):
        meta = node.frontmatter or {}
        fields = [node.name, meta.get("title"), meta.get("description"), *node.tags, node.content]
        haystack = " ".join(str(f) for f in fields if f).lower()
        if needle in haystack:
            results.append(node)
    return results


def get_file_content(content_dir: Path, relative_path: str) -> str:
    root = Path(content_dir).resolve()
    try:
        target = (root / relative_path).resolve()
    except (OSError, ValueError) as exc:
        # e.g. an embedded null byte
        raise ContentError(f"Invalid file path: '{relative_path}'", status_code=400) from exc
    if target == root or not target.is_relative_to(root):
        raise ContentError(f"Invalid file path: '{relative_path}'", status_code=400)

    exclude = config.get_config().content.exclude_patterns
    if any(is_excluded(part, exclude) for part in target.relative_to(root).parts):
        raise ContentError(f"File not found: '{relative_path}'", status_code=404)
    if not target.is_file():
        raise ContentError(f"File not found: '{relative_path}'", status_code=404)

    try:
        text = target.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ContentError(f"Failed to read '{relative_path}': {exc}") from exc

    if is_markdown(target.name):
        return frontmatter.strip_frontmatter(text)
    return text
