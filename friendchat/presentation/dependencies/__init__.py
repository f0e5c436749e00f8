from friendchat.presentation.dependencies.auth import (
    AuthUser,
    decode_service_token,
    get_current_user,
)

__all__ = ["AuthUser", "decode_service_token", "get_current_user"]
