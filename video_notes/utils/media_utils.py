"""
Media utilities for video file handling.

Provides common functions for media file operations:
- Video detection by extension
- Folder scanning for source videos
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def is_video_file(file_path: Path, extension: str = ".mp4") -> bool:
    """Check if path is a regular file ending with the video extension.

    The match is on the raw filename, so ".MP4" does not match ".mp4".

    Args:
        file_path: Path to check
        extension: Required filename ending

    Returns:
        True if file is a video of the expected type
    """
    return file_path.name.endswith(extension) and file_path.is_file()


def list_videos(folder: Path, extension: str = ".mp4") -> list[Path]:
    """List direct child videos of a folder, sorted by filename.

    Args:
        folder: Folder to scan (not recursive)
        extension: Required filename ending

    Returns:
        Video paths sorted lexicographically by name

    Raises:
        FileNotFoundError: If folder doesn't exist
        NotADirectoryError: If folder is not a directory
        PermissionError: If folder can't be listed
    """
    videos = [p for p in folder.iterdir() if is_video_file(p, extension)]
    videos.sort(key=lambda p: p.name)
    logger.debug(f"Scanned {folder}: {len(videos)} video(s)")
    return videos
