#!/usr/bin/env python3
"""
File system utilities for the panEDTA pipeline.
Provides safe file operations with error handling.
"""
import os
import shutil
import logging
import tempfile
from contextlib import contextmanager
from typing import Optional, Generator, BinaryIO, TextIO, Union

from panedta.exceptions import ConfigError, FileOperationError

logger = logging.getLogger("panedta.utils.file")


def ensure_dir(directory: str) -> bool:
    """Ensure a directory exists, creating it if necessary

    Args:
        directory: Directory path

    Returns:
        True if successful

    Raises:
        FileOperationError: If directory cannot be created
    """
    try:
        if not os.path.exists(directory):
            logger.debug(f"Creating directory: {directory}")
            os.makedirs(directory, exist_ok=True)
        return True
    except OSError as e:
        error_msg = f"Error creating directory {directory}: {str(e)}"
        logger.error(error_msg)
        raise FileOperationError(error_msg, {"directory": directory}) from e


@contextmanager
def atomic_write(file_path: str, mode: str = 'w',
                 encoding: Optional[str] = None) -> Generator[Union[TextIO, BinaryIO], None, None]:
    """Write to a file atomically using a temporary file

    The target only appears once the block finishes without error, so an
    interrupted write never leaves a partial file behind.

    Args:
        file_path: Path to the file
        mode: File open mode (must be a write mode)
        encoding: File encoding

    Yields:
        Open temporary file object

    Raises:
        FileOperationError: If file operation fails
        ValueError: If mode is not a write mode
    """
    if 'w' not in mode:
        raise ValueError(f"Invalid mode for atomic_write: {mode} (must be write mode)")

    base_dir = os.path.dirname(file_path) or '.'
    ensure_dir(base_dir)

    try:
        fd, temp_path = tempfile.mkstemp(suffix=f".{os.path.basename(file_path)}.tmp", dir=base_dir)
        os.close(fd)
    except OSError as e:
        raise FileOperationError(f"Error creating temporary file for {file_path}: {str(e)}",
                                 {"file_path": file_path}) from e

    logger.debug(f"Created temporary file: {temp_path} for atomic write to {file_path}")

    if 'b' in mode:
        handle = open(temp_path, mode)
    else:
        handle = open(temp_path, mode, encoding=encoding or 'utf-8')

    try:
        yield handle
        handle.close()
        shutil.move(temp_path, file_path)
        logger.debug(f"Atomically wrote to file: {file_path}")
    except BaseException:
        if not handle.closed:
            handle.close()
        if os.path.exists(temp_path):
            os.unlink(temp_path)
            logger.debug(f"Deleted temporary file: {temp_path} after error")
        raise


def check_file_exists(file_path: Optional[str], min_size: int = 0) -> bool:
    """Check if a file exists and has a minimum size

    Args:
        file_path: Path to the file
        min_size: Minimum file size in bytes

    Returns:
        True if file exists and meets size requirement
    """
    if not file_path:
        return False
    try:
        if not os.path.isfile(file_path):
            logger.debug(f"File does not exist: {file_path}")
            return False

        if min_size > 0 and os.path.getsize(file_path) < min_size:
            logger.debug(f"File too small: {file_path}")
            return False

        return True
    except OSError as e:
        logger.warning(f"Error checking file {file_path}: {str(e)}")
        return False


def check_input_file(file_path: Optional[str], label: str) -> str:
    """Require an input file to exist and be non-empty

    Args:
        file_path: Path to the file
        label: Human readable name of the input, used in the error

    Returns:
        The file path

    Raises:
        ConfigError: If the file is missing or empty
    """
    if not check_file_exists(file_path, min_size=1):
        raise ConfigError(f"The {label} file {file_path} is not found or is empty",
                          {"input": label, "file_path": file_path})
    return file_path


def write_text_file(file_path: str, content: str, encoding: str = 'utf-8') -> None:
    """Write text file atomically

    Args:
        file_path: Path to the file
        content: Content to write
        encoding: File encoding

    Raises:
        FileOperationError: If file cannot be written
    """
    try:
        with atomic_write(file_path, 'w', encoding=encoding) as f:
            f.write(content)
    except OSError as e:
        error_msg = f"Error writing file {file_path}: {str(e)}"
        logger.error(error_msg)
        raise FileOperationError(error_msg, {"file_path": file_path}) from e
