from prompt_catalog import config, definitions

DEFINITIONS_YAML = """\
categories:
  guides:
    name: Guides
    patterns: ["**/guides/**"]
    defaultTags: [guides, docs]
  agents:
    name: Bots
    patterns: ["**/bots/**"]
    defaultTags: [agents]
tags:
  docs:
    name: Docs
    color: "#6b7280"
patterns:
  - pattern: "**/*.py"
    tags: [python]
    category: scripts
"""


class TestDefaultDefinitions:
    def test_builtin_categories(self):
        defs = definitions.default_definitions()
        assert list(defs.categories) == ["agents", "commands", "prompts", "instructions"]
        assert defs.categories["prompts"].patterns == ["**/prompts/**", "**/claude/**", "**/*.prompt.*"]
        assert defs.categories["commands"].default_tags == ["commands"]
        assert defs.patterns == []

    def test_every_category_has_a_tag(self):
        defs = definitions.default_definitions()
        assert set(defs.tags) == set(defs.categories)


class TestLoadDefinitions:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert definitions.load_definitions(tmp_path) == definitions.default_definitions()

    def test_merges_over_defaults(self, tmp_path):
        (tmp_path / "definitions.yaml").write_text(DEFINITIONS_YAML, encoding="utf-8")
        defs = definitions.load_definitions(tmp_path)

        assert defs.categories["guides"].default_tags == ["guides", "docs"]
        assert defs.categories["agents"].name == "Bots"
        assert defs.categories["agents"].patterns == ["**/bots/**"]
        assert "instructions" in defs.categories
        assert defs.tags["docs"].color == "#6b7280"
        assert defs.tags["prompts"].name == "Prompts"
        assert [p.pattern for p in defs.patterns] == ["**/*.py"]
        assert defs.patterns[0].category == "scripts"

    def test_partial_file(self, tmp_path):
        (tmp_path / "definitions.yaml").write_text("patterns:\n  - pattern: x/**\n    tags: [x]\n")
        defs = definitions.load_definitions(tmp_path)
        assert len(defs.categories) == 4
        assert defs.patterns[0].tags == ["x"]

    def test_invalid_yaml_gives_defaults(self, tmp_path):
        (tmp_path / "definitions.yaml").write_text("categories: [unclosed\n")
        assert definitions.load_definitions(tmp_path) == definitions.default_definitions()

    def test_invalid_shape_gives_defaults(self, tmp_path):
        (tmp_path / "definitions.yaml").write_text("categories:\n  broken: 3\n")
        assert definitions.load_definitions(tmp_path) == definitions.default_definitions()

    def test_non_mapping_gives_defaults(self, tmp_path):
        (tmp_path / "definitions.yaml").write_text("- just\n- a list\n")
        assert definitions.load_definitions(tmp_path) == definitions.default_definitions()

    def test_custom_filename(self, tmp_path):
        (tmp_path / "tags.yml").write_text(DEFINITIONS_YAML, encoding="utf-8")
        defs = definitions.load_definitions(tmp_path, "tags.yml")
        assert "guides" in defs.categories


class TestResolveDefinitions:
    def test_can_ignore_definitions_file(self, tmp_path, monkeypatch):
        (tmp_path / "definitions.yaml").write_text(DEFINITIONS_YAML, encoding="utf-8")
        monkeypatch.setenv("USE_DEFINITIONS_FILE", "false")
        config.get_config.cache_clear()
        try:
            assert "guides" not in definitions.resolve_definitions(tmp_path).categories
        finally:
            config.get_config.cache_clear()
