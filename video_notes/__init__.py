"""
Video notes: turn a folder of videos into one markdown study-notes document.
"""

__version__ = "0.1.0"
