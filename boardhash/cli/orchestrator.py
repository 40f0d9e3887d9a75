"""
CLI workflow orchestration for boardhash.

Provides the CLIOrchestrator class that resolves configuration, opens the
hash store and dispatches each subcommand to its workflow.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from ..database import HashStore
from ..hashing.algorithms import HashAlgorithm, compute_hash
from ..hashing.analysis import compute_hash_record
from ..hashing.dependencies import Image
from ..hashing.errors import HashingError
from ..user_config import get_user_config
from ..utils.validators import validate_image_id, validate_batch_size, validate_directory
from ..workflows.candidates import find_candidates
from ..workflows.ingest import ingest_image
from ..workflows.rehash import RehashMode, rehash
from ..workflows.similarity import compare
from .arg_parser import parse_arguments
from .reporting import (
    print_json,
    print_hashes,
    print_ingest,
    print_comparison,
    print_rehash_run,
    print_candidates,
    print_stats,
)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates one CLI invocation.

    Command-line options take precedence over the user configuration,
    which takes precedence over the defaults in config.py.
    """

    def __init__(self, argv=None):
        """
        Initialize the orchestrator.

        Args:
            argv: Argument list to parse (default: sys.argv)
        """
        self.argv = argv
        self.logger = None
        self.args = None
        self.config = get_user_config()
        self._store: Optional[HashStore] = None

    @property
    def store(self) -> HashStore:
        """Hash store opened on first use."""
        if self._store is None:
            db_path = self.args.db_path or self.config.database_file
            self._store = HashStore(db_path)
        return self._store

    @property
    def upload_root(self) -> str:
        return self.args.upload_root or self.config.upload_root

    def run(self) -> int:
        """
        Execute the selected subcommand.

        Returns:
            Exit code (0 for success, 1 for error)
        """
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)
        Image.MAX_IMAGE_PIXELS = self.config.max_image_pixels

        handler = getattr(self, f"_cmd_{self.args.command}")
        try:
            return handler()
        except HashingError as e:
            self.logger.error(str(e))
            return 1
        except sqlite3.Error as e:
            self.logger.error(f"Hash store error: {e}")
            return 1

    def _cmd_hash(self) -> int:
        path = self.args.file
        if not path.is_file():
            self.logger.error(f"File not found: {path}")
            return 1

        data = path.read_bytes()
        params = self.config.hash_params()

        if self.args.algorithm is None:
            record = compute_hash_record(path.name, data, params)
            if self.args.as_json:
                print_json(record.to_dict())
            else:
                print_hashes(str(path), record)
            return 0

        algorithm = HashAlgorithm(self.args.algorithm)
        result = compute_hash(algorithm, data, params)
        if self.args.as_json:
            print_json({'file': str(path), 'algorithm': algorithm.value, 'hash': result})
        else:
            print_hashes(str(path), result, algorithm.value)
        return 0

    def _cmd_ingest(self) -> int:
        valid, message = validate_directory(self.upload_root)
        if not valid:
            self.logger.error(message)
            return 1

        status = 'approved' if self.args.approve else 'pending'
        try:
            image, record = ingest_image(
                self.store,
                self.args.path,
                upload_root=self.upload_root,
                status=status,
                params=self.config.hash_params(),
            )
        except (FileNotFoundError, ValueError) as e:
            self.logger.error(str(e))
            return 1

        if self.args.as_json:
            print_json({'image': image.to_dict(), 'hashes': record.to_dict()})
        else:
            print_ingest(image, record)
        return 0

    def _cmd_compare(self) -> int:
        for image_id in (self.args.image_id_a, self.args.image_id_b):
            valid, message = validate_image_id(image_id)
            if not valid:
                self.logger.error(message)
                return 1

        result = compare(self.store, self.args.image_id_a, self.args.image_id_b, self.args.formula)
        if result is None:
            self.logger.error("Both images need a hash record to be compared")
            return 1

        if self.args.as_json:
            print_json(result.to_dict())
        else:
            print_comparison(result)
        return 0

    def _cmd_rehash(self) -> int:
        mode = RehashMode(self.args.mode)
        if mode is RehashMode.SINGLE and self.args.image_id:
            valid, message = validate_image_id(self.args.image_id)
            if not valid:
                self.logger.error(message)
                return 1

        batch_size = self.args.batch_size or self.config.rehash_batch_size
        valid, message = validate_batch_size(batch_size)
        if not valid:
            self.logger.error(message)
            return 1

        run = rehash(
            self.store,
            mode,
            image_id=self.args.image_id,
            upload_root=self.upload_root,
            batch_size=batch_size,
            params=self.config.hash_params(),
            show_progress=not self.args.no_progress,
        )

        if self.args.as_json:
            print_json(run.to_dict())
        else:
            print_rehash_run(run)
        failed = run.message.startswith('Error') or (mode is RehashMode.SINGLE and not run.processed)
        return 1 if failed else 0

    def _cmd_candidates(self) -> int:
        valid, message = validate_image_id(self.args.image_id)
        if not valid:
            self.logger.error(message)
            return 1

        kwargs = {}
        if self.args.max_distance is not None:
            kwargs['max_distance'] = self.args.max_distance
        candidates = find_candidates(self.store, self.args.image_id, **kwargs)

        if self.args.as_json:
            print_json([{'image_id': image_id, 'phash_distance': distance}
                        for image_id, distance in candidates])
        else:
            print_candidates(self.args.image_id, candidates)
        return 0

    def _cmd_stats(self) -> int:
        stats = self.store.get_stats()
        if self.args.as_json:
            print_json(stats)
        else:
            print_stats(stats)
        return 0

    def _cmd_config(self) -> int:
        config = self.config

        if self.args.init:
            if config.create_example_config():
                print("✓ Created example configuration file at:")
                print(f"  {config.config_file_path}")
                print("\nEdit this file to customize boardhash settings.")
                return 0
            print("✗ Failed to create configuration file.")
            return 1

        settings = {
            'database_file': config.database_file,
            'upload_root': config.upload_root,
            'rehash_batch_size': config.rehash_batch_size,
            'dct_method': config.dct_method,
            'max_image_pixels': config.max_image_pixels,
        }
        if self.args.as_json:
            print_json({'config_file': str(config.config_file_path), 'settings': settings})
            return 0

        print(f"Configuration file: {config.config_file_path}")
        if config.config_file_path.exists():
            print("Status: ✓ Found")
        else:
            print("Status: ✗ Not found (using defaults)")
            print("\nRun 'boardhash config --init' to create one.")

        print("\nCurrent settings:")
        for key, value in settings.items():
            shown = f"{value:,}" if isinstance(value, int) else value
            print(f"  {key}: {shown}")
        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
