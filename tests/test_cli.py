import json

from prompt_catalog import cli


class TestCli:
    def test_build_writes_bundle(self, content_dir, tmp_path):
        output = tmp_path / "out" / "content-data.json"
        assert cli.main(["--content-dir", str(content_dir), "build", "--output", str(output)]) == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["stats"]["totalFiles"] == 8

    def test_build_uses_configured_paths(self, configured, tmp_path):
        assert cli.main(["build"]) == 0
        assert (tmp_path / "public" / "content-data.json").is_file()

    def test_stats(self, content_dir, capsys):
        assert cli.main(["--content-dir", str(content_dir), "stats"]) == 0
        stats = json.loads(capsys.readouterr().out)
        assert stats["parsedFiles"] == 6
        assert stats["failedFiles"] == 2

    def test_search(self, content_dir, capsys):
        assert cli.main(["--content-dir", str(content_dir), "search", "bullet"]) == 0
        assert capsys.readouterr().out.strip() == "prompts/summarize.prompt.md  [prompts]"

    def test_missing_content_dir(self, tmp_path):
        assert cli.main(["--content-dir", str(tmp_path / "missing"), "stats"]) == 1

    def test_content_dir_after_subcommand(self, content_dir, tmp_path):
        output = tmp_path / "bundle.json"
        assert cli.main(["build", "--content-dir", str(content_dir), "--output", str(output)]) == 0
        assert json.loads(output.read_text(encoding="utf-8"))["stats"]["totalFiles"] == 8

    def test_subcommand_content_dir_wins(self, content_dir, tmp_path, capsys):
        argv = ["--content-dir", str(tmp_path / "missing"), "stats", "--content-dir", str(content_dir)]
        assert cli.main(argv) == 0
        assert json.loads(capsys.readouterr().out)["totalFiles"] == 8
