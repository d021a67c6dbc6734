import enum

from fastapi import FastAPI, Request, status

from preference_service.core.exceptions import ServiceException, custom_http_exception_handler


# Preference store errors
# The kind classifies the failure so callers can branch on it without inspecting the message.
# Storage failures keep the original exception as __cause__.
# ----------------------------------------------------------------------------------------------------------------------


class PreferenceErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    EXECUTION = "execution"


class PreferenceError(Exception):
    def __init__(self, kind: PreferenceErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"PreferenceError(kind={self.kind.name}, message={self.message!r})"


# HTTP exceptions for each error kind
# ----------------------------------------------------------------------------------------------------------------------


class PreferenceNotFoundException(ServiceException):
    status_code = status.HTTP_404_NOT_FOUND
    type = "preferences/preference-not-found"
    detail = "Preference not found, check the preference id"


class PreferenceScopeNotEnabledException(ServiceException):
    status_code = status.HTTP_403_FORBIDDEN
    type = "preferences/scope-not-enabled"
    detail = "This preference cannot be used in the requested scope"


class PreferenceStorageException(ServiceException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    type = "preferences/storage-error"
    detail = "Preferences could not be read or written, please try again later"


def to_service_exception(error: PreferenceError) -> ServiceException:
    """Translate a preference store error into the HTTP exception for its kind."""
    exception_types: dict[PreferenceErrorKind, type[ServiceException]] = {
        PreferenceErrorKind.NOT_FOUND: PreferenceNotFoundException,
        PreferenceErrorKind.FORBIDDEN: PreferenceScopeNotEnabledException,
        PreferenceErrorKind.EXECUTION: PreferenceStorageException,
    }
    exception = exception_types[error.kind]()
    exception.__cause__ = error
    return exception


# Handler that renders preference store errors as RFC 7807 problem details.
# ----------------------------------------------------------------------------------------------------------------------


async def preference_error_handler(request: Request, exc: Exception):
    assert isinstance(exc, PreferenceError), "sanity check failed"
    return await custom_http_exception_handler(request, to_service_exception(exc))


def register_preference_error_handler(app: FastAPI):
    _ = app.exception_handler(PreferenceError)(preference_error_handler)
