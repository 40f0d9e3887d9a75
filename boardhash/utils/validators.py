"""
Input validation and security checks for boardhash.

Provides validators for path traversal prevention, stored-path resolution,
image identifiers and rehash parameters.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

from ..config import UPLOAD_PATH_PREFIX

# Five groups of five lowercase hex characters
IMAGE_ID_RE = re.compile(r'^[0-9a-f]{5}(?:-[0-9a-f]{5}){4}$')


def validate_path_in_directory(filepath: str, base_directory: str) -> bool:
    """
    Validate that a file path is within the expected base directory.

    Prevents path traversal where a stored path could point outside
    the upload root.

    Args:
        filepath: Path to validate
        base_directory: Expected base directory

    Returns:
        True if path is within base_directory, False otherwise

    Examples:
        >>> validate_path_in_directory('/srv/uploads/images/a.jpg', '/srv/uploads')
        True
        >>> validate_path_in_directory('/etc/passwd', '/srv/uploads')
        False
    """
    try:
        file_resolved = Path(filepath).resolve()
        base_resolved = Path(base_directory).resolve()
        return str(file_resolved).startswith(str(base_resolved) + os.sep) or \
               str(file_resolved) == str(base_resolved)
    except (OSError, RuntimeError, ValueError):
        return False


def resolve_original_path(original_path: str, upload_root: str) -> Optional[str]:
    """
    Map a stored original path to a file under the upload root.

    Stored paths look like 'uploads/images/original/img_..._1280.jpg'; the
    leading 'uploads/' is dropped and the rest joined to ``upload_root``.

    Returns:
        Absolute path, or None if the result escapes the upload root
    """
    relative = original_path.replace('\\', '/')
    if relative.startswith(UPLOAD_PATH_PREFIX):
        relative = relative[len(UPLOAD_PATH_PREFIX):]
    relative = relative.lstrip('/')

    candidate = os.path.join(upload_root, relative)
    if not validate_path_in_directory(candidate, upload_root):
        return None
    return os.path.abspath(candidate)


def validate_image_id(image_id: str) -> tuple[bool, str]:
    """
    Validate the format of an image identifier.

    Examples:
        >>> validate_image_id('0a1b2-c3d4e-f5a6b-7c8d9-e0f1a')
        (True, '')
        >>> validate_image_id('')
        (False, 'Image id is required')
    """
    if not image_id:
        return False, "Image id is required"

    if not IMAGE_ID_RE.match(image_id.strip()):
        return False, f"Malformed image id: {image_id}"

    return True, ""


def validate_batch_size(batch_size) -> tuple[bool, str]:
    """
    Validate a rehash batch size.

    Examples:
        >>> validate_batch_size(10)
        (True, '')
        >>> validate_batch_size(0)
        (False, 'Batch size must be between 1 and 1000')
    """
    try:
        batch_size = int(batch_size)
        if not 1 <= batch_size <= 1000:
            return False, "Batch size must be between 1 and 1000"
        return True, ""
    except (ValueError, TypeError):
        return False, "Batch size must be an integer"


def validate_directory(directory: str) -> tuple[bool, str]:
    """
    Validate that a directory exists and is accessible.

    Examples:
        >>> validate_directory('/nonexistent/directory')
        (False, 'Directory not found: /nonexistent/directory')
    """
    if not directory:
        return False, "Directory path is required"

    if not os.path.exists(directory):
        return False, f"Directory not found: {directory}"

    if not os.path.isdir(directory):
        return False, f"Path is not a directory: {directory}"

    if not os.access(directory, os.R_OK):
        return False, f"Cannot read directory (permission denied): {directory}"

    return True, ""


__all__ = [
    'IMAGE_ID_RE',
    'validate_path_in_directory',
    'resolve_original_path',
    'validate_image_id',
    'validate_batch_size',
    'validate_directory',
]
