"""Command line interface: ``liveset``.

Subcommands:
    info FILE...                 print extracted metadata as JSON
    scan ROOT [--backups]        list documents under ROOT
    projects ROOT                list project folders, valid and invalid
    load-project DIR             load every document of a project folder
    dump FILE [-o OUT]           write the parsed document tree as JSON
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .aio import (
    ScanEventType,
    find_documents,
    find_documents_streaming,
    find_projects,
    find_projects_streaming,
    load_live_set,
    load_project,
    open_project,
)
from .aio.progress import ProgressEvent
from .config import BatchFailureMode, LoadConfig, ScanConfig
from .errors import LiveSetError

logger = logging.getLogger(__name__)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


async def _info(args) -> int:
    infos = []
    for path in args.files:
        live_set = await load_live_set(path)
        infos.append(live_set.info.to_dict())
    _print_json(infos[0] if len(infos) == 1 else infos)
    return 0


async def _scan(args) -> int:
    config = ScanConfig(include_backups=args.backups, follow_symlinks=args.follow_symlinks)
    if not args.stream:
        for path in await find_documents(args.root, config=config):
            print(path)
        return 0

    async for event in find_documents_streaming(args.root, config=config):
        if event.type is ScanEventType.FOUND:
            print(f"found     {event.path}")
        elif event.type is ScanEventType.SCANNING:
            print(f"scanning  {event.path}", file=sys.stderr)
        elif event.type is ScanEventType.ERROR:
            print(f"error     {event.path}: {event.error}", file=sys.stderr)
    return 0


async def _projects(args) -> int:
    config = ScanConfig(follow_symlinks=args.follow_symlinks)
    if not args.stream:
        _print_json((await find_projects(args.root, config=config)).to_dict())
        return 0

    async for event in find_projects_streaming(args.root, config=config):
        if event.type is ScanEventType.PROJECT_FOUND:
            status = "valid  " if event.is_valid else "invalid"
            print(f"{status}  {event.path}")
            for error in event.project.errors:
                print(f"           - {error}")
        elif event.type is ScanEventType.ERROR:
            print(f"error    {event.path}: {event.error}", file=sys.stderr)
    return 0


def _print_progress(event: ProgressEvent) -> None:
    if event.stage == "set-progress" and event.nested is not None:
        print(f"[{event.percent:5.1f}%] {event.path}: {event.nested.stage}", file=sys.stderr)
    elif event.percent is not None:
        print(f"[{event.percent:5.1f}%] {event.stage}", file=sys.stderr)


async def _load_project(args) -> int:
    failure_mode = BatchFailureMode.ABORT if args.abort_on_error else BatchFailureMode.SKIP
    project = await open_project(args.directory)
    progress = _print_progress if args.progress else None
    result = await load_project(project, progress, LoadConfig(failure_mode=failure_mode))
    _print_json({
        'name': project.name,
        'path': project.path,
        'liveSets': [live_set.info.to_dict() for live_set in result.live_sets],
        'failures': [
            {'path': failure.path, 'error': str(failure.error)}
            for failure in result.failures
        ],
    })
    return 0 if result.ok else 1


async def _dump(args) -> int:
    live_set = await load_live_set(args.file)
    text = json.dumps(live_set.tree.to_python(), indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("Wrote tree of %s to %s", args.file, args.output)
    else:
        print(text)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="liveset",
        description="Extract metadata from Ableton Live Set documents and project folders",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More logging (-v info, -vv debug)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Print document metadata as JSON")
    info.add_argument("files", nargs="+", help="Document files")
    info.set_defaults(handler=_info)

    scan = subparsers.add_parser("scan", help="Find documents under a directory")
    scan.add_argument("root", help="Directory to search")
    scan.add_argument("--backups", action="store_true", help="Include documents in Backup folders")
    scan.add_argument("--stream", action="store_true", help="Print scan events as they happen")
    scan.add_argument("--follow-symlinks", action="store_true", help="Descend into symlinked directories")
    scan.set_defaults(handler=_scan)

    projects = subparsers.add_parser("projects", help="Find and validate project folders")
    projects.add_argument("root", help="Directory to search")
    projects.add_argument("--stream", action="store_true", help="Print projects as they are found")
    projects.add_argument("--follow-symlinks", action="store_true", help="Descend into symlinked directories")
    projects.set_defaults(handler=_projects)

    load = subparsers.add_parser("load-project", help="Load every document of a project folder")
    load.add_argument("directory", help="Project folder")
    load.add_argument("--abort-on-error", action="store_true",
                      help="Stop at the first document that fails to load")
    load.add_argument("--progress", action="store_true", help="Print progress to stderr")
    load.set_defaults(handler=_load_project)

    dump = subparsers.add_parser("dump", help="Write the parsed document tree as JSON")
    dump.add_argument("file", help="Document file")
    dump.add_argument("-o", "--output", help="Output file (default: stdout)")
    dump.set_defaults(handler=_dump)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return asyncio.run(args.handler(args))
    except LiveSetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
