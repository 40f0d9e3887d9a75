"""
Report formatting and display for the CLI interface.

Prints hashes, comparisons, rehash runs and candidate lists either as
human-readable text or as JSON.
"""

from __future__ import annotations

import json
from typing import Union

from ..models import ComparisonResult, ImageRecord, ImageHashRecord, RehashRun
from ..utils.formatters import format_number, format_size, format_timestamp, pluralize


def print_json(data) -> None:
    """Print data as indented JSON."""
    print(json.dumps(data, indent=2, sort_keys=True))


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def _print_hash_record(record: ImageHashRecord) -> None:
    print(f"  aHash: {record.ahash}")
    print(f"  dHash: {record.dhash}")
    print(f"  pHash: {record.phash}")
    print(f"  pHash blocks: {' '.join(record.phash_blocks)}")


def print_hashes(path: str, hashes: Union[str, list, ImageHashRecord], algorithm: str = '') -> None:
    """
    Print the hashes computed for one file.

    Args:
        path: File that was hashed
        hashes: A single hex hash, a list of region hashes or a full record
        algorithm: Algorithm name for single-hash output
    """
    print(f"\n{path}")
    if isinstance(hashes, ImageHashRecord):
        _print_hash_record(hashes)
    elif isinstance(hashes, list):
        for i, region_hash in enumerate(hashes):
            print(f"  {algorithm} [{i:2d}]: {region_hash}")
    else:
        print(f"  {algorithm}: {hashes}")


def print_ingest(image: ImageRecord, record: ImageHashRecord) -> None:
    """Print a newly ingested image."""
    _print_section_header(f"INGESTED {image.image_id}")
    print(f"  Path: {image.original_path}")
    print(f"  Status: {image.status}")
    print(f"  {image.mime_type} | {image.resolution} | {format_size(image.size_bytes)}")
    print(f"  SHA-256: {image.sha256}")
    _print_hash_record(record)


def print_comparison(result: ComparisonResult) -> None:
    """
    Print a comparison the way the moderation panel shows it.

    The percentage is informational; no accept/reject decision is printed.
    """
    _print_section_header(f"{result.image_id_a}  vs  {result.image_id_b}")
    print(f"  aHash distance: {result.ahash_distance}")
    print(f"  dHash distance: {result.dhash_distance}")
    print(f"  pHash distance: {result.phash_distance} (mean over blocks)")
    print(f"\n  Similarity: {result.similarity_percent}% ({result.formula})")


def print_rehash_run(run: RehashRun) -> None:
    """Print the outcome of a rehash run."""
    print(f"\n{run.message}")
    if run.skipped:
        print(f"Skipped {pluralize(len(run.skipped), 'image')}:")
        for image_id, reason in run.skipped.items():
            print(f"  {image_id}: {reason}")


def print_candidates(image_id: str, candidates: list[tuple[str, int]]) -> None:
    """Print near-duplicate candidates, closest first."""
    _print_section_header(f"CANDIDATES FOR {image_id}")
    if not candidates:
        print("  No candidates found.")
        return
    for candidate_id, distance in candidates:
        print(f"  {candidate_id}  pHash distance {distance}")


def print_stats(stats: dict) -> None:
    """Print store statistics."""
    print(f"\nStore: {stats['db_path']} ({format_size(stats['db_size_bytes'])})")
    print(f"  Images: {format_number(stats['total_images'])} "
          f"({format_number(stats['approved_images'])} approved)")
    print(f"  Hashed: {format_number(stats['hashed_images'])}")
    print(f"  Pending rehash: {format_number(stats['pending_rehash'])}")
    if stats.get('last_rehash') is not None:
        print(f"  Last rehash: {format_timestamp(stats['last_rehash'])}")


__all__ = [
    'print_json',
    'print_hashes',
    'print_ingest',
    'print_comparison',
    'print_rehash_run',
    'print_candidates',
    'print_stats',
]
