"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File operations used by the canonical extractor: streaming copy and manifest writing.
Destinations are always created exclusively, so an existing file is never overwritten.
"""
import os
import shutil
import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 4 * 1024 * 1024  # 4MB


class FileService:
    """
    Thin wrappers over file I/O that translate OS errors into RuntimeError
    with the offending path in the message.
    """

    @staticmethod
    def copy_file(src: str, dst: str) -> None:
        """
        Copies src to dst in fixed-size chunks.
        Fails if dst already exists; a partially written dst is removed.
        """
        try:
            source = open(src, 'rb')
        except OSError as e:
            raise RuntimeError(f"Error opening source file {src}: {e}") from e

        with source:
            try:
                target = open(dst, 'xb')
            except OSError as e:
                raise RuntimeError(f"Error creating destination file {dst}: {e}") from e

            try:
                with target:
                    shutil.copyfileobj(source, target, COPY_BUFFER_SIZE)
            except OSError as e:
                FileService._remove_quietly(dst)
                raise RuntimeError(f"Error copying {src} to {dst}: {e}") from e

        try:
            shutil.copystat(src, dst)
        except OSError as e:
            logger.debug(f"Could not copy timestamps to {dst}: {e}")

    @staticmethod
    def write_manifest(paths: Iterable[str], manifest_path: str) -> None:
        """
        Writes one path per line, UTF-8, newline-terminated, no header.
        Fails if manifest_path already exists.
        """
        try:
            with open(manifest_path, 'x', encoding='utf-8', newline='\n') as f:
                for path in paths:
                    f.write(f"{path}\n")
        except OSError as e:
            raise RuntimeError(f"Error creating duplicate list file {manifest_path}: {e}") from e

    @staticmethod
    def ensure_directory(path: str) -> Path:
        """Creates the directory (and parents) if needed."""
        directory = Path(path)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RuntimeError(f"Error creating directory {path}: {e}") from e
        if not os.access(directory, os.W_OK):
            raise RuntimeError(f"Directory is not writable: {path}")
        return directory

    @staticmethod
    def _remove_quietly(path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove partial copy {path}: {e}")
