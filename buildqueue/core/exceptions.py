"""
Custom application exceptions.
"""


class BuildQueueError(Exception):
    """Base exception for build queue errors."""
    pass


class ConfigurationError(BuildQueueError):
    """Required setting is missing."""
    pass


class APIError(BuildQueueError):
    """External API call failed."""
    pass


class CodeshipAPIError(APIError):
    """Codeship API call failed."""
    pass


class AuthenticationError(CodeshipAPIError):
    """Codeship rejected the credentials."""
    pass


class OrganizationNotFoundError(CodeshipAPIError):
    """Organization is not accessible with the given credentials."""
    pass
