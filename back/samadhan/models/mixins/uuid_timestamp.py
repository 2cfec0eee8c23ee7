# Standard library imports
import uuid

# Third-party imports
from sqlalchemy import Column, Uuid, text

# Local application imports
from samadhan.models.column_types import AwareDateTime, utcnow


class UUIDTimeStampMixin:
    """A reusable mixin that:
    - Provides a UUID primary key named 'id'
    - Includes created_at and updated_at timestamps

    Timestamps get a Python-side default so in-memory objects carry them
    before the first flush; ``updated_at`` is stamped explicitly by the
    complaint services on every mutation.
    """

    __abstract__ = True

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    created_at = Column(
        AwareDateTime(),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        index=True,
    )

    updated_at = Column(
        AwareDateTime(),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=utcnow,
    )
