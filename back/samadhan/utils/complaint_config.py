"""
Display and ordering metadata for the complaint enums.

Every table is keyed by enum member and built once at import. The ``get_*``
lookups accept an enum member or its raw string value and return ``None`` for
anything unrecognised.
"""

# Standard library imports
from dataclasses import dataclass
import enum
from types import MappingProxyType
from typing import TypeVar

# Local application imports
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
    Department,
)

E = TypeVar("E", bound=enum.Enum)
D = TypeVar("D")


@dataclass(frozen=True)
class CategoryConfig:
    value: ComplaintCategory
    label: str
    color: str
    icon: str


@dataclass(frozen=True)
class StatusConfig:
    value: ComplaintStatus
    label: str
    color: str
    bg_color: str
    description: str


@dataclass(frozen=True)
class PriorityConfig:
    value: ComplaintPriority
    label: str
    color: str
    bg_color: str
    weight: int


@dataclass(frozen=True)
class SeverityConfig:
    value: ComplaintSeverity
    label: str
    color: str
    bg_color: str
    weight: int


@dataclass(frozen=True)
class DepartmentConfig:
    value: Department
    label: str
    description: str
    color: str
    contact_email: str | None = None


COMPLAINT_CATEGORIES = MappingProxyType(
    {
        c.value: c
        for c in (
            CategoryConfig(ComplaintCategory.ROAD_DAMAGE, "Road Damage", "#f59e0b", "🛣️"),
            CategoryConfig(ComplaintCategory.STREET_LIGHT, "Street Light", "#fbbf24", "💡"),
            CategoryConfig(ComplaintCategory.GARBAGE_COLLECTION, "Garbage Collection", "#84cc16", "🗑️"),
            CategoryConfig(ComplaintCategory.WATER_SUPPLY, "Water Supply", "#0ea5e9", "💧"),
            CategoryConfig(ComplaintCategory.SEWAGE, "Sewage", "#64748b", "🚰"),
            CategoryConfig(ComplaintCategory.ILLEGAL_CONSTRUCTION, "Illegal Construction", "#ef4444", "🏗️"),
            CategoryConfig(ComplaintCategory.NOISE_POLLUTION, "Noise Pollution", "#8b5cf6", "🔊"),
            CategoryConfig(ComplaintCategory.AIR_POLLUTION, "Air Pollution", "#6b7280", "🏭"),
            CategoryConfig(ComplaintCategory.PUBLIC_SAFETY, "Public Safety", "#dc2626", "⚠️"),
            CategoryConfig(ComplaintCategory.VANDALISM, "Vandalism", "#7c3aed", "🎨"),
            CategoryConfig(ComplaintCategory.OTHER, "Other", "#6b7280", "📋"),
        )
    }
)

COMPLAINT_STATUSES = MappingProxyType(
    {
        s.value: s
        for s in (
            StatusConfig(
                ComplaintStatus.PENDING, "Pending", "#f59e0b", "#fef3c7", "Complaint submitted, awaiting review"
            ),
            StatusConfig(
                ComplaintStatus.IN_PROGRESS, "In Progress", "#3b82f6", "#dbeafe", "Work is currently underway"
            ),
            StatusConfig(
                ComplaintStatus.UNDER_REVIEW,
                "Under Review",
                "#8b5cf6",
                "#ede9fe",
                "Complaint is being reviewed by officials",
            ),
            StatusConfig(
                ComplaintStatus.RESOLVED, "Resolved", "#10b981", "#d1fae5", "Issue has been successfully resolved"
            ),
            StatusConfig(ComplaintStatus.REJECTED, "Rejected", "#ef4444", "#fee2e2", "Complaint was rejected"),
            StatusConfig(ComplaintStatus.CLOSED, "Closed", "#6b7280", "#f3f4f6", "Complaint has been closed"),
        )
    }
)

PRIORITY_LEVELS = MappingProxyType(
    {
        p.value: p
        for p in (
            PriorityConfig(ComplaintPriority.LOW, "Low", "#10b981", "#d1fae5", 1),
            PriorityConfig(ComplaintPriority.MEDIUM, "Medium", "#f59e0b", "#fef3c7", 2),
            PriorityConfig(ComplaintPriority.HIGH, "High", "#f97316", "#ffedd5", 3),
            PriorityConfig(ComplaintPriority.CRITICAL, "Critical", "#dc2626", "#fee2e2", 4),
        )
    }
)

SEVERITY_LEVELS = MappingProxyType(
    {
        s.value: s
        for s in (
            SeverityConfig(ComplaintSeverity.MINOR, "Minor", "#10b981", "#d1fae5", 1),
            SeverityConfig(ComplaintSeverity.MODERATE, "Moderate", "#f59e0b", "#fef3c7", 2),
            SeverityConfig(ComplaintSeverity.MAJOR, "Major", "#f97316", "#ffedd5", 3),
            SeverityConfig(ComplaintSeverity.SEVERE, "Severe", "#dc2626", "#fee2e2", 4),
        )
    }
)

DEPARTMENTS = MappingProxyType(
    {
        d.value: d
        for d in (
            DepartmentConfig(
                Department.PUBLIC_WORKS,
                "Public Works",
                "Roads, infrastructure, and public facilities",
                "#f59e0b",
                "publicworks@civic.gov",
            ),
            DepartmentConfig(
                Department.SANITATION,
                "Sanitation",
                "Garbage collection and waste management",
                "#84cc16",
                "sanitation@civic.gov",
            ),
            DepartmentConfig(
                Department.WATER_BOARD, "Water Board", "Water supply and distribution", "#0ea5e9", "water@civic.gov"
            ),
            DepartmentConfig(
                Department.ELECTRICITY,
                "Electricity",
                "Power supply and street lighting",
                "#fbbf24",
                "electricity@civic.gov",
            ),
            DepartmentConfig(
                Department.TRAFFIC_POLICE,
                "Traffic Police",
                "Traffic management and road safety",
                "#ef4444",
                "traffic@civic.gov",
            ),
            DepartmentConfig(
                Department.MUNICIPAL_CORPORATION,
                "Municipal Corporation",
                "General municipal services",
                "#3b82f6",
                "municipal@civic.gov",
            ),
            DepartmentConfig(
                Department.ENVIRONMENT,
                "Environment",
                "Pollution control and environmental issues",
                "#10b981",
                "environment@civic.gov",
            ),
            DepartmentConfig(Department.HEALTH, "Health", "Public health and sanitation", "#ec4899", "health@civic.gov"),
            DepartmentConfig(
                Department.HOUSING, "Housing", "Building regulations and housing", "#8b5cf6", "housing@civic.gov"
            ),
            DepartmentConfig(
                Department.PARKS_RECREATION,
                "Parks & Recreation",
                "Parks, gardens, and recreational facilities",
                "#22c55e",
                "parks@civic.gov",
            ),
        )
    }
)


def _lookup(table: MappingProxyType[E, D], enum_cls: type[E], value: E | str | None) -> D | None:
    try:
        return table.get(enum_cls(value))
    except ValueError:
        return None


def get_category_config(category: ComplaintCategory | str | None) -> CategoryConfig | None:
    return _lookup(COMPLAINT_CATEGORIES, ComplaintCategory, category)


def get_status_config(status: ComplaintStatus | str | None) -> StatusConfig | None:
    return _lookup(COMPLAINT_STATUSES, ComplaintStatus, status)


def get_priority_config(priority: ComplaintPriority | str | None) -> PriorityConfig | None:
    return _lookup(PRIORITY_LEVELS, ComplaintPriority, priority)


def get_severity_config(severity: ComplaintSeverity | str | None) -> SeverityConfig | None:
    return _lookup(SEVERITY_LEVELS, ComplaintSeverity, severity)


def get_department_config(department: Department | str | None) -> DepartmentConfig | None:
    return _lookup(DEPARTMENTS, Department, department)


def priority_weight(priority: ComplaintPriority | str) -> int:
    """Sort weight, low=1 .. critical=4. Raises ValueError for unknown values."""
    return PRIORITY_LEVELS[ComplaintPriority(priority)].weight


def severity_weight(severity: ComplaintSeverity | str) -> int:
    """Sort weight, minor=1 .. severe=4. Raises ValueError for unknown values."""
    return SEVERITY_LEVELS[ComplaintSeverity(severity)].weight


def _check_tables() -> None:
    for table, enum_cls in (
        (COMPLAINT_CATEGORIES, ComplaintCategory),
        (COMPLAINT_STATUSES, ComplaintStatus),
        (PRIORITY_LEVELS, ComplaintPriority),
        (SEVERITY_LEVELS, ComplaintSeverity),
        (DEPARTMENTS, Department),
    ):
        missing = set(enum_cls) - set(table)
        if missing:
            raise RuntimeError(f"{enum_cls.__name__} config missing entries: {sorted(m.value for m in missing)}")


_check_tables()
