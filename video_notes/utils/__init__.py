"""
Shared utilities.

Modules:
    time_utils: Elapsed-time formatting
    media_utils: Video detection and folder scanning
"""

from video_notes.utils.media_utils import is_video_file, list_videos
from video_notes.utils.time_utils import humanize_ms

__all__ = [
    # time_utils
    "humanize_ms",
    # media_utils
    "is_video_file",
    "list_videos",
]
