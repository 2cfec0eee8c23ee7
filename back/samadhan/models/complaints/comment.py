# Third-party imports
from sqlalchemy import Boolean, Column, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

# Local application imports
from samadhan.models.base import Base
from samadhan.models.column_types import AwareDateTime
from samadhan.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class Comment(Base, UUIDTimeStampMixin):
    __tablename__ = "comments"

    complaint_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("complaints.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Uuid(as_uuid=True), ForeignKey("user.id"), nullable=False)
    user_name = Column(String(200), nullable=False, default="")
    content = Column(Text, nullable=False)
    # True iff the author was an officer or admin when posting
    is_official = Column(Boolean, default=False, nullable=False)
    edited_at = Column(AwareDateTime(), nullable=True)

    complaint = relationship("Complaint", back_populates="comments")
