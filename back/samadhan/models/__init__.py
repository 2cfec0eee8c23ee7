"""
Database models package.

This package contains all SQLAlchemy models for the application.
"""

# Local application imports
from samadhan.models.auth import User
from samadhan.models.base import Base
from samadhan.models.complaints import Comment, Complaint, ComplaintUpvote

__all__ = [
    "Base",
    # Identity
    "User",
    # Complaints
    "Comment",
    "Complaint",
    "ComplaintUpvote",
]
