# Standard library imports
import enum


class ComplaintStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    UNDER_REVIEW = "under-review"
    RESOLVED = "resolved"
    REJECTED = "rejected"
    CLOSED = "closed"


class ComplaintCategory(str, enum.Enum):
    ROAD_DAMAGE = "road-damage"
    STREET_LIGHT = "street-light"
    GARBAGE_COLLECTION = "garbage-collection"
    WATER_SUPPLY = "water-supply"
    SEWAGE = "sewage"
    ILLEGAL_CONSTRUCTION = "illegal-construction"
    NOISE_POLLUTION = "noise-pollution"
    AIR_POLLUTION = "air-pollution"
    PUBLIC_SAFETY = "public-safety"
    VANDALISM = "vandalism"
    OTHER = "other"


class ComplaintPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComplaintSeverity(str, enum.Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    SEVERE = "severe"


class Department(str, enum.Enum):
    PUBLIC_WORKS = "public-works"
    SANITATION = "sanitation"
    WATER_BOARD = "water-board"
    ELECTRICITY = "electricity"
    TRAFFIC_POLICE = "traffic-police"
    MUNICIPAL_CORPORATION = "municipal-corporation"
    ENVIRONMENT = "environment"
    HEALTH = "health"
    HOUSING = "housing"
    PARKS_RECREATION = "parks-recreation"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum values ("in-progress") rather than member names."""
    return [member.value for member in enum_cls]
