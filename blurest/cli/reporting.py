"""
Report formatting and display for the CLI interface.
"""

from __future__ import annotations

import json
from typing import Optional


def format_size(size_bytes: float) -> str:
    """Format a byte count in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def print_result(path: str, result: dict) -> None:
    """Print one gateway result as a JSON line tagged with its path."""
    print(json.dumps({'path': path, **result}))


def print_validation_summary(stats: Optional[dict], failures: int) -> None:
    """
    Print the counters collected while warming.

    Args:
        stats: ValidationStats.to_dict() output (None if unavailable)
        failures: Number of images that could not be processed
    """
    print("\n" + "=" * 50)
    print("BLURHASH CACHE SUMMARY")
    print("=" * 50)
    if stats:
        print(f"Unchanged (mtime):      {stats['hits']:,}")
        print(f"Touched (mtime only):   {stats['refreshed']:,}")
        print(f"Re-encoded (changed):   {stats['recomputed']:,}")
        print(f"Encoded (new):          {stats['misses']:,}")
        print(f"Reuse rate:             {stats['hit_rate']:.1f}%")
    print(f"Failed:                 {failures:,}")


def print_store_stats(stats: dict) -> None:
    """Print BlurhashCache.get_stats() output."""
    print(f"Database:      {stats['db_path']}")
    print(f"Size:          {format_size(stats['db_size_mb'] * 1024 * 1024)}")
    print(f"Entries:       {stats['total_entries']:,}")
    print(f"Total pixels:  {stats['total_pixels']:,}")
    print(f"Last updated:  {stats['last_updated'] or '-'}")


__all__ = [
    'format_size',
    'print_result',
    'print_validation_summary',
    'print_store_stats',
]
