# Local application imports
from samadhan.services.auth.permission_services import (
    ensure_can_write,
    require_permission,
    require_read_permission,
)

__all__ = ["ensure_can_write", "require_permission", "require_read_permission"]
