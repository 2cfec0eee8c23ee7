# Third-party imports
from sqlalchemy import Column, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

# Local application imports
from samadhan.models.base import Base
from samadhan.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class ComplaintUpvote(Base, UUIDTimeStampMixin):
    __tablename__ = "complaint_upvotes"
    __table_args__ = (UniqueConstraint("complaint_id", "user_id", name="unique_complaint_upvoter"),)

    complaint_id = Column(Uuid(as_uuid=True), ForeignKey("complaints.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("user.id"), nullable=False, index=True)

    complaint = relationship("Complaint", back_populates="upvote_entries")
