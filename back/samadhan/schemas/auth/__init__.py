from .user_schemas import TokenClaims, UserAdminUpdate, UserProfileUpdate, UserProvision, UserResponse

__all__ = ["TokenClaims", "UserAdminUpdate", "UserProfileUpdate", "UserProvision", "UserResponse"]
