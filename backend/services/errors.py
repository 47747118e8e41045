"""Service-level errors and the feature-flag gate."""

from config import is_feature_enabled


class ServiceError(Exception):
    """Base for collaborator failures with a user-friendly code."""
    def __init__(self, message: str, code: str = "service_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class FeatureDisabledError(ServiceError):
    def __init__(self, feature: str):
        self.feature = feature
        super().__init__(f"The '{feature}' feature is disabled.", code="feature_disabled")


class AuthError(ServiceError):
    def __init__(self, message: str = "Invalid email or password", code: str = "auth_failed"):
        super().__init__(message, code=code)


class PaymentsError(ServiceError):
    pass


def require_feature(feature: str) -> None:
    if not is_feature_enabled(feature):
        raise FeatureDisabledError(feature)
