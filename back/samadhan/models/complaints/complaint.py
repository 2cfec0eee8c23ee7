# Third-party imports
from sqlalchemy import JSON, Boolean, Column, Enum as SQLEnum, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.orm import composite, relationship

# Local application imports
from samadhan.models.base import Base
from samadhan.models.column_types import AwareDateTime
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
    Department,
    enum_values,
)
from samadhan.models.complaints.location import GeoLocation
from samadhan.models.complaints.upvote import ComplaintUpvote
from samadhan.models.mixins.uuid_timestamp import UUIDTimeStampMixin


class Complaint(Base, UUIDTimeStampMixin):
    __tablename__ = "complaints"

    # Filed by the citizen, fixed after creation
    user_id = Column(Uuid(as_uuid=True), ForeignKey("user.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(SQLEnum(ComplaintCategory, name="complaint_category", values_callable=enum_values), nullable=False)

    # Location
    latitude = Column(Float, nullable=False, index=True)
    longitude = Column(Float, nullable=False, index=True)
    address = Column(Text, nullable=False)
    city = Column(String(100), nullable=True, index=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    landmark = Column(String(200), nullable=True)
    location = composite(GeoLocation, latitude, longitude, address, city, state, country, postal_code, landmark)

    # Media (opaque URLs from the storage service) and search tags
    image_urls = Column(JSON, default=list, nullable=False)
    tags = Column(JSON, default=list, nullable=False)

    # Lifecycle
    status = Column(
        SQLEnum(ComplaintStatus, name="complaint_status", values_callable=enum_values),
        default=ComplaintStatus.PENDING,
        nullable=False,
        index=True,
    )
    priority = Column(
        SQLEnum(ComplaintPriority, name="complaint_priority", values_callable=enum_values),
        default=ComplaintPriority.MEDIUM,
        nullable=False,
    )
    severity = Column(
        SQLEnum(ComplaintSeverity, name="complaint_severity", values_callable=enum_values),
        default=ComplaintSeverity.MODERATE,
        nullable=False,
    )
    assigned_department = Column(
        SQLEnum(Department, name="department", values_callable=enum_values),
        nullable=True,
        index=True,
    )
    assigned_officer_id = Column(Uuid(as_uuid=True), ForeignKey("user.id"), nullable=True, index=True)
    official_notes = Column(Text, nullable=True)
    resolution_description = Column(Text, nullable=True)
    resolved_at = Column(AwareDateTime(), nullable=True)

    # Moderation
    is_flagged = Column(Boolean, default=False, nullable=False)
    flag_reason = Column(Text, nullable=True)

    # AI suggestion as returned by the categorization service
    ai_detected_category = Column(
        SQLEnum(ComplaintCategory, name="complaint_category", values_callable=enum_values),
        nullable=True,
    )
    ai_confidence = Column(Float, nullable=True)

    # Upvotes; ``upvotes`` always equals len(upvoted_by)
    upvotes = Column(Integer, default=0, nullable=False, index=True)
    upvote_entries = relationship(
        ComplaintUpvote,
        back_populates="complaint",
        cascade="all, delete-orphan",
        collection_class=set,
        lazy="selectin",
    )
    upvoted_by = association_proxy(
        "upvote_entries",
        "user_id",
        creator=lambda user_id: ComplaintUpvote(user_id=user_id),
    )

    comments = relationship(
        "Comment",
        back_populates="complaint",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    # Compare-and-set token, bumped by SQLAlchemy on every UPDATE
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    def __str__(self) -> str:
        return f"Complaint: {self.title} ({self.status})"
