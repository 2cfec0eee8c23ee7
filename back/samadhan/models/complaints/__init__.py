# Local application imports
from samadhan.models.complaints.comment import Comment
from samadhan.models.complaints.complaint import Complaint
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
    Department,
)
from samadhan.models.complaints.location import GeoLocation
from samadhan.models.complaints.upvote import ComplaintUpvote

__all__ = [
    "Comment",
    "Complaint",
    "ComplaintCategory",
    "ComplaintPriority",
    "ComplaintSeverity",
    "ComplaintStatus",
    "ComplaintUpvote",
    "Department",
    "GeoLocation",
]
