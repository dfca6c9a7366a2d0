"""
Dead Simple Player CLI - Entry point

Builds a playback queue from files and folders and shows what metadata the
player would display for them.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from rich.markup import escape
from rich.table import Table

from dead_simple_player.core import config
from dead_simple_player.core.output import log, setup_loguru, show
from dead_simple_player.domain.metadata import (
    ARTWORK,
    BUILTIN_KEYS,
    CREATOR,
    TITLE,
    NOT_FOUND,
    MetadataKey,
    MetadataResolver,
    get_executor,
    records_from_file,
    shutdown_executor,
)
from dead_simple_player.domain.playback import PlayerSession, creator_text, title_text
from dead_simple_player.domain.playlist import CONTAINER_TYPES

DEFAULT_LOOKUP_TIMEOUT = 10.0


def _lookup(resolver: MetadataResolver, key: MetadataKey, timeout: float):
    """Wait for a key's result; a lookup that takes too long counts as not found."""
    try:
        resolver.get_value(key, timeout=timeout)
    except TimeoutError:
        logger.warning(f"Timed out looking up '{key.id}'")
        return NOT_FOUND
    return resolver.get(key)


def _format_value(key: MetadataKey, value) -> str:
    if value is None:
        return "-"
    if key is ARTWORK:
        return f"[image, {len(value)} bytes]"
    return str(value)


def run_init() -> int:
    """Create the config/data directories and a default config file."""
    log("Initializing Dead Simple Player configuration...")
    config.ensure_directories()
    config.load_config()
    log(f"Configuration loaded from: {config.get_config_path()}")
    log(f"Data directory: {config.get_data_dir()}")
    return 0


def run_queue(
    cfg: config.Config,
    paths: list[str],
    recursive: bool = False,
    include_folders: bool = True,
    timeout: float = DEFAULT_LOOKUP_TIMEOUT,
) -> int:
    """Queue the given files/folders and print the queue with titles and creators.

    Returns:
        Exit code (0 for success, 1 if nothing could be queued)
    """
    if not include_folders:
        cfg.playlist.allowed_content_types = [
            content_type.name.lower()
            for content_type in cfg.playlist.content_types() - CONTAINER_TYPES
        ]

    session = PlayerSession(cfg, records_loader=records_from_file)
    for path in paths:
        session.open(path, recursive=recursive or None)

    if not len(session.queue):
        log("Nothing playable was found.", level="error")
        return 1

    executor = get_executor(cfg.metadata.max_workers)
    table = Table(title=f"Queue ({len(session.queue)} items)")
    table.add_column("#", justify="right")
    table.add_column("")
    table.add_column("Title")
    table.add_column("Creator")

    # An unset cursor reads as the first item, which the session has prepared
    current = session.queue.current_index or 0
    for index, item in enumerate(session.queue):
        if index == current and session.metadata is not None:
            resolver = session.metadata
        else:
            resolver = MetadataResolver(records_from_file(item), executor=executor)
        title = title_text(_lookup(resolver, TITLE, timeout), item)
        creator = creator_text(_lookup(resolver, CREATOR, timeout))
        marker = "▶" if index == current else ""
        table.add_row(str(index + 1), marker, escape(title), escape(creator))

    show(table)
    session.close()
    return 0


def run_info(
    cfg: config.Config,
    local_path: str,
    raw: bool = False,
    timeout: float = DEFAULT_LOOKUP_TIMEOUT,
) -> int:
    """Print the resolved metadata (and optionally the raw tags) of one file.

    Returns:
        Exit code (0 for success, 1 if the file has no readable metadata)
    """
    path = Path(local_path).expanduser()
    if not path.is_file():
        log(f"Error: File not found: {local_path}", level="error")
        return 1

    records = records_from_file(path)
    if not records:
        log(f"No readable metadata in: {local_path}", level="warning")
        return 1

    resolver = MetadataResolver(records, executor=get_executor(cfg.metadata.max_workers))

    table = Table(title=escape(path.name))
    table.add_column("Key")
    table.add_column("Value")
    for key in BUILTIN_KEYS:
        result = _lookup(resolver, key, timeout)
        table.add_row(key.id, escape(_format_value(key, result.value_or(None))))
    show(table)

    if raw:
        raw_table = Table(title="Raw tags")
        raw_table.add_column("Tag")
        raw_table.add_column("Value")
        for record in records:
            try:
                value = record.load()
            except Exception as e:
                value = f"<unreadable: {e}>"
            if isinstance(value, bytes):
                value = f"[binary, {len(value)} bytes]"
            raw_table.add_row(escape(record.tag), escape(str(value)[:100]))
        show(raw_table)

    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dead-simple-player",
        description="Dead Simple Player - queue media and read its metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_LOOKUP_TIMEOUT,
        help="Seconds to wait for each metadata lookup",
    )

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    subparsers.add_parser("init", help="Create the default configuration")

    queue_parser = subparsers.add_parser("queue", help="Build a queue from files and folders")
    queue_parser.add_argument("paths", nargs="+", help="Media files or folders")
    queue_parser.add_argument(
        "--recursive",
        action="store_true",
        help="Also look inside sub-folders",
    )
    queue_parser.add_argument(
        "--no-folders",
        action="store_true",
        help="Only accept media files, not folders",
    )

    info_parser = subparsers.add_parser("info", help="Show metadata for a media file")
    info_parser.add_argument("file", help="Media file")
    info_parser.add_argument("--raw", action="store_true", help="Also list raw tags")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the dead-simple-player command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.subcommand:
        parser.print_help()
        sys.exit(1)

    cfg = config.load_config()
    setup_loguru(
        config.get_log_file_path(cfg),
        level=cfg.logging.level,
        max_file_size_mb=cfg.logging.max_file_size_mb,
        backup_count=cfg.logging.backup_count,
        console_output=cfg.logging.console_output,
    )

    try:
        if args.subcommand == "init":
            code = run_init()
        elif args.subcommand == "queue":
            code = run_queue(
                cfg,
                args.paths,
                recursive=args.recursive,
                include_folders=not args.no_folders,
                timeout=args.timeout,
            )
        else:
            code = run_info(cfg, args.file, raw=args.raw, timeout=args.timeout)
    finally:
        shutdown_executor(wait=False)

    sys.exit(code)


if __name__ == "__main__":
    main()
