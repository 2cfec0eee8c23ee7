# Standard library imports
from dataclasses import dataclass


@dataclass(frozen=True)
class GeoLocation:
    """Where a complaint was reported. Embedded in ``Complaint`` as a composite."""

    latitude: float
    longitude: float
    address: str
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postal_code: str | None = None
    landmark: str | None = None

    def __composite_values__(self) -> tuple:
        return (
            self.latitude,
            self.longitude,
            self.address,
            self.city,
            self.state,
            self.country,
            self.postal_code,
            self.landmark,
        )
