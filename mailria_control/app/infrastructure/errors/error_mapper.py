from clients.mailria_client_sdk.errors import ApiError, DecodeError


class ErrorMapper:
    _STATUS_HINTS = {
        401: "Your session has expired. Please sign in again.",
        403: "You do not have permission for this action.",
    }

    @classmethod
    def to_message(cls, error: Exception, fallback: str) -> str:
        if isinstance(error, DecodeError):
            return fallback
        if isinstance(error, ApiError):
            if error.server_message:
                return error.server_message
            hint = cls._STATUS_HINTS.get(error.status_code or -1)
            return hint or fallback
        return fallback

