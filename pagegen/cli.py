from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Optional

from .config import SiteConfig, load_config
from .errors import PageGenError
from .newsletter import SubscriptionForm, SubscriptionStatus
from .pipeline import build, templates_path, write_site
from .utils import parse_bool, parse_int

COMMANDS = {"build", "subscribe"}
DEFAULT_CONFIG = "site.toml"


def build_site(args: argparse.Namespace, config: SiteConfig) -> None:
    config_path = Path(args.config)
    project_root = Path.cwd()
    content_dir = Path(args.content)
    output_dir = Path(args.output)
    if args.site_url is not None:
        config = config.replace(site_url=args.site_url.strip().rstrip("/"))
    if args.feed_limit <= 0:
        raise PageGenError(f"--feed-limit must be positive, got {args.feed_limit}")
    config = config.replace(feed_limit=args.feed_limit)

    result = build(config, content_dir, workers=args.build_workers, config_path=config_path)
    drafts = sum(1 for doc in result.documents if not doc.published)
    external = sum(1 for doc in result.documents if doc.is_external)
    print(f"Loaded {len(result.documents)} documents ({drafts} drafts, {external} external).")

    count = write_site(
        result,
        config,
        output_dir,
        project_root,
        clean=args.clean,
        templates_dir=templates_path(config, config_path),
    )
    print(f"Rendered {count} pages, {len(result.index)} index entries, {len(result.feed)} feed entries.")
    if not config.site_url:
        print("site_url is not set; rss.xml was skipped.")


def run_subscribe(args: argparse.Namespace, config: SiteConfig) -> bool:
    endpoint = (args.endpoint or config.newsletter_url).strip()
    if not endpoint:
        print("No newsletter endpoint configured (newsletter_url).", file=sys.stderr)
        return False
    form = SubscriptionForm(endpoint)
    status = form.submit(args.email)
    if status is SubscriptionStatus.SUCCESS:
        print("Thank you, subscription confirmed.")
        return True
    print(f"Subscription failed: {form.message}", file=sys.stderr)
    return False


def make_parser(config: dict, config_path: str) -> argparse.ArgumentParser:
    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    def cfg_bool(key: str, default: bool) -> bool:
        return parse_bool(cfg_value(key, default))

    def cfg_int(key: str, default: int) -> int:
        return parse_int(cfg_value(key, default), default)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")

    parser = argparse.ArgumentParser(prog="pagegen", description="Markdown blog page generator.")
    commands = parser.add_subparsers(dest="command", required=True)

    build_parser = commands.add_parser("build", parents=[common], help="Build the site (default).")
    build_parser.add_argument(
        "--content",
        default=cfg_str("content_dir", "content/posts"),
        help="Directory containing Markdown posts.",
    )
    build_parser.add_argument("--output", default=cfg_str("output_dir", "public"), help="Output directory.")
    build_parser.add_argument(
        "--site-url",
        default=None,
        help="Public site URL used for the feed and meta tags (overrides config).",
    )
    build_parser.add_argument(
        "--feed-limit",
        default=cfg_int("feed_limit", 1000),
        type=int,
        help="Maximum number of entries in the feed and the index listing.",
    )
    build_parser.add_argument(
        "--build-workers",
        default=cfg_int("build_workers", 0),
        type=int,
        help="Number of worker threads for parsing (0 = auto).",
    )
    build_parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean", True),
        help="Replace the output directory instead of writing over it.",
    )

    subscribe_parser = commands.add_parser(
        "subscribe", parents=[common], help="Send one email address to the mailing list."
    )
    subscribe_parser.add_argument("email", help="Address to subscribe.")
    subscribe_parser.add_argument("--endpoint", default="", help="Mailing-list endpoint (overrides config).")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not any(arg in COMMANDS or arg in {"-h", "--help"} for arg in argv):
        argv.insert(0, "build")

    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default=DEFAULT_CONFIG)
    pre_args, _ = pre_parser.parse_known_args(argv)

    try:
        raw_config = load_config(Path(pre_args.config))
        config = SiteConfig.from_mapping(raw_config)
    except PageGenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)

    args = make_parser(raw_config, pre_args.config).parse_args(argv)

    if args.command == "subscribe":
        if not run_subscribe(args, config):
            sys.exit(1)
        return

    start = time.perf_counter()
    try:
        build_site(args, config)
    except PageGenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        print("Build aborted; no output was written.", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {args.output}")
