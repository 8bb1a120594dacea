#!/usr/bin/env python3
"""
Library report: find every project folder under a directory and summarise it.

This example demonstrates:
- Streaming project discovery with live feedback
- Loading each valid project one document at a time
- Reading tempo, version and plugin inventory from the results
"""

import asyncio
import sys
from collections import Counter
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from livesetlib import LoadConfig, open_project, load_project
from livesetlib.aio import ScanEventType, find_projects_streaming


async def main():
    """Summarise every project under a music folder."""
    root_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()

    print(f"Searching: {root_path}")
    print("-" * 50)

    valid = []
    async for event in find_projects_streaming(root_path):
        if event.type is ScanEventType.PROJECT_FOUND:
            marker = "ok " if event.is_valid else "bad"
            print(f"  [{marker}] {event.project.name}")
            if event.is_valid:
                valid.append(event.path)
        elif event.type is ScanEventType.ERROR:
            print(f"  [err] {event.path}: {event.error}")

    plugins = Counter()
    for path in valid:
        project = await open_project(path)
        result = await load_project(project, config=LoadConfig())
        print(f"\n{project.name}")
        for live_set in result.live_sets:
            info = live_set.info
            print(f"  {info.name}: {info.tempo} BPM, Live {info.version}, {info.track_count} tracks")
            plugins.update(detail.name for _, detail in info.unique_plugins() if detail.name)
        for failure in result.failures:
            print(f"  {Path(failure.path).name}: failed ({failure.error})")

    if plugins:
        print(f"\nMost used plugins:")
        for name, count in plugins.most_common(5):
            print(f"  {count:3d}  {name}")


if __name__ == "__main__":
    asyncio.run(main())
