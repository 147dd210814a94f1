"""Custom exception types for the community metrics generator."""


class MetricsGeneratorError(Exception):
    """Base exception for all recoverable metrics generator errors."""


class ConfigurationError(MetricsGeneratorError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(MetricsGeneratorError):
    """Raised when the GitHub token is unavailable."""


class ApiError(MetricsGeneratorError):
    """Raised when a GitHub API request fails or returns an unexpected response."""


class AdopterListError(MetricsGeneratorError):
    """Raised when the adopter document cannot be fetched or parsed."""


class PersistenceConflictError(MetricsGeneratorError):
    """Raised when the snapshot file changed since its version token was read."""
