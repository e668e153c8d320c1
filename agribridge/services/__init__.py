"""
Application services.
"""

from agribridge.services.announcement import AnnouncementService, ANNOUNCEMENT_TARGETS

__all__ = [
    "AnnouncementService",
    "ANNOUNCEMENT_TARGETS",
]
