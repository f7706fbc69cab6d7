from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel

from prompt_catalog import config

# Node fields that only exist on one kind of node, or that get stripped before output
_OPTIONAL_NODE_KEYS = ("children", "content", "frontmatter", "size", "lastModified", "last_modified")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileTreeItem(CamelModel):
    name: str
    type: Literal["file", "folder"]
    path: str
    children: list["FileTreeItem"] | None = None
    tags: list[str] = []
    content: str | None = None
    frontmatter: dict[str, Any] | None = None
    size: int | None = None
    last_modified: datetime | None = None

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @model_serializer(mode="wrap")
    def _omit_missing(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for key in _OPTIONAL_NODE_KEYS:
            if key in data and data[key] is None:
                del data[key]
        return data


class CategoryDefinition(CamelModel):
    name: str
    description: str | None = None
    patterns: list[str] = []
    default_tags: list[str] = []


class TagDefinition(CamelModel):
    name: str
    description: str | None = None
    color: str | None = None


class PatternDefinition(CamelModel):
    pattern: str
    tags: list[str] = []
    category: str | None = None


class ContentDefinitions(CamelModel):
    categories: dict[str, CategoryDefinition] = {}
    tags: dict[str, TagDefinition] = {}
    patterns: list[PatternDefinition] = []


class ContentFilter(CamelModel):
    tags: list[str] = []
    category: str | None = None


class LoadContentOptions(CamelModel):
    include_content: bool = False
    parse_markdown: bool = True
    apply_tags: bool = True
    exclude_patterns: list[str] = config.DEFAULT_EXCLUDE_PATTERNS


class ContentStats(CamelModel):
    total_files: int = 0
    parsed_files: int = 0
    failed_files: int = 0
    parse_success_rate: int = 0
    total_categories: int = 0
    total_tags: int = 0
    category_count: dict[str, int] = {}
    tag_count: dict[str, int] = {}


class StaticContentData(CamelModel):
    content_tree: list[FileTreeItem]
    definitions: ContentDefinitions
    content_map: dict[str, str]
    stats: ContentStats
    filtered_content: dict[str, list[FileTreeItem]]


class ContentIndex(CamelModel):
    files: list[FileTreeItem]
    definitions: ContentDefinitions
    last_updated: datetime
    total_files: int
    categories: dict[str, int]
    tags: dict[str, int]


class StatsResponse(ContentStats):
    definitions: ContentDefinitions


class FileContentResponse(CamelModel):
    path: str
    content: str


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str
