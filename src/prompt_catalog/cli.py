import argparse
import json
import logging
from pathlib import Path

from prompt_catalog import build, config, loader

logger = logging.getLogger(__name__)


def _content_dir(args: argparse.Namespace) -> Path:
    return args.content_dir or config.get_config().content.content_dir


def cmd_build(args: argparse.Namespace) -> int:
    data = build.generate_static_content_data(_content_dir(args))
    build.save_static_content_data(data, args.output)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    tree = loader.load_content_tree(_content_dir(args))
    stats = build.compute_stats(tree)
    print(json.dumps(stats.model_dump(by_alias=True), indent=2))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    options = loader.default_options().model_copy(update={"include_content": True})
    tree = loader.load_content_tree(_content_dir(args), options)
    for node in loader.search_content(tree, args.query):
        tags = ", ".join(node.tags)
        print(f"{node.path}" + (f"  [{tags}]" if tags else ""))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt-catalog",
        description="Index a directory of markdown prompts, agents, commands and instructions",
    )
    content_help = "Content directory (default: $CONTENT_DIR or ./content)"
    parser.add_argument("--content-dir", type=Path, help=content_help)

    # accepted after the subcommand too; SUPPRESS keeps the top-level value when omitted
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--content-dir", type=Path, default=argparse.SUPPRESS, help=content_help)

    sub = parser.add_subparsers(dest="command", required=True)

    build_cmd = sub.add_parser("build", parents=[common], help="Write the static content data JSON bundle")
    build_cmd.add_argument("--output", type=Path, help="Output file (default: public/content-data.json)")
    build_cmd.set_defaults(func=cmd_build)

    stats_cmd = sub.add_parser("stats", parents=[common], help="Print content statistics")
    stats_cmd.set_defaults(func=cmd_stats)

    search_cmd = sub.add_parser("search", parents=[common], help="Search file names, titles, tags and bodies")
    search_cmd.add_argument("query")
    search_cmd.set_defaults(func=cmd_search)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    content_dir = _content_dir(args)
    if not content_dir.is_dir():
        logger.error(f"Content directory not found: {content_dir}")
        return 1

    return args.func(args)
