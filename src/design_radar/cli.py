#!/usr/bin/env python3
"""Design Radar CLI: normalize Figma documents and report design changes.

Commands:
  design-radar normalize RAW [-o OUT]     -> canonical document as JSON
  design-radar diff OLD NEW [--raw]       -> change list between two documents
  design-radar check [--file-key KEY ...] -> fetch from Figma, diff against last snapshot, store
"""
import argparse
import json
import logging
import pathlib
import sys

from .config import RadarConfig, DEFAULT_CONFIG_PATH, ensure_radar_dirs
from .differ import diff_snapshots
from .errors import DesignRadarError
from .figma_client import FigmaClient, load_document
from .formatter import count_by_kind, figma_node_link, format_changes_for_llm
from .models import ChangeKind
from .normalizer import filter_file
from .pipeline import check_file
from .rules import FilterRules
from .store import SnapshotStore

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def cmd_normalize(args, cfg):
    rules = FilterRules.from_config(cfg)
    canonical = filter_file(load_document(args.raw), rules)
    text = json.dumps(canonical, indent=2, ensure_ascii=False)
    if args.output:
        pathlib.Path(args.output).write_text(text + "\n", encoding='utf-8')
        print(f"Wrote {args.output}")
    else:
        print(text)
    return 0


def cmd_diff(args, cfg):
    old_doc = load_document(args.old)
    new_doc = load_document(args.new)
    if args.raw:
        rules = FilterRules.from_config(cfg)
        old_doc = filter_file(old_doc, rules)
        new_doc = filter_file(new_doc, rules)

    changes = diff_snapshots(old_doc, new_doc)
    if args.json:
        print(json.dumps([c.to_dict() for c in changes], indent=2, ensure_ascii=False))
    else:
        print(format_changes_for_llm(changes))
    logger.info(f"Diff summary: {count_by_kind(changes)}")
    return 0


def cmd_check(args, cfg):
    file_keys = args.file_key or cfg.file_keys
    if not file_keys:
        print("No file keys given. Pass --file-key or set figma.file_keys in the config.")
        return 1
    token = cfg.figma_token()
    if not token:
        print(f"Missing Figma token: set ${cfg.get('figma.token_env')}")
        return 1

    ensure_radar_dirs(cfg)
    client = FigmaClient(token, base_url=cfg.get('figma.api_base'),
                         timeout=cfg.get('figma.timeout_seconds', 30))
    store = SnapshotStore(cfg.get('store.db_path'))
    rules = FilterRules.from_config(cfg)
    keep = cfg.get('store.keep_snapshots', 10)

    failed = []
    for file_key in file_keys:
        try:
            result = check_file(client, store, file_key, rules, keep)
        except DesignRadarError as e:
            logger.error(f"{file_key}: check failed: {e}")
            print(f"{file_key}: check failed: {e}", file=sys.stderr)
            failed.append(file_key)
            continue
        print_check_result(result)
    if failed:
        logger.warning(f"{len(failed)} of {len(file_keys)} files failed: {', '.join(failed)}")
        return 1
    return 0


def print_check_result(result):
    if result.skipped:
        print(f"{result.file_name or result.file_key}: unchanged (version {result.version})")
        return
    if result.first_snapshot:
        print(f"{result.file_name}: first snapshot stored (version {result.version})")
        return
    print(f"=== {result.file_name} (version {result.version})")
    if result.author:
        print(f"Last edit: {result.author} at {result.author_date or 'unknown time'}")
    print(format_changes_for_llm(result.changes))
    node_ids = []
    for c in result.changes:
        gone = c.property == 'node' and c.kind is ChangeKind.REMOVED
        if c.property != 'page' and not gone and c.node_id not in node_ids:
            node_ids.append(c.node_id)
    for node_id in node_ids:
        print(f"  {node_id}: {figma_node_link(result.file_key, node_id)}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="design-radar", description="Figma design change radar")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable info logging")
    ap.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to YAML config")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_norm = sub.add_parser("normalize", help="Filter a raw Figma document to canonical form")
    p_norm.add_argument("raw", type=pathlib.Path)
    p_norm.add_argument("-o", "--output", help="Write JSON here instead of stdout")
    p_norm.set_defaults(func=cmd_normalize)

    p_diff = sub.add_parser("diff", help="Diff two documents")
    p_diff.add_argument("old", type=pathlib.Path)
    p_diff.add_argument("new", type=pathlib.Path)
    p_diff.add_argument("--raw", action="store_true", help="Inputs are raw Figma responses")
    p_diff.add_argument("--json", action="store_true", help="Print change records as JSON")
    p_diff.set_defaults(func=cmd_diff)

    p_check = sub.add_parser("check", help="Check Figma files against stored snapshots")
    p_check.add_argument("--file-key", action="append", help="Figma file key (repeatable)")
    p_check.set_defaults(func=cmd_check)

    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        cfg = RadarConfig(args.config)
        return args.func(args, cfg)
    except (DesignRadarError, OSError, json.JSONDecodeError) as e:
        logger.error(f"{args.cmd} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
