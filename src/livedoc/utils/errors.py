"""
Custom exception classes for Livedoc.
"""

from typing import Any


class LivedocError(Exception):
    """Base exception for all Livedoc errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        suggestions: list[str] | None = None,
        context: dict[str, Any] | None = None
    ):
        """Initialize Livedoc error with enhanced information.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            suggestions: List of suggested remediation steps
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.error_code = error_code or self.__class__.__name__.upper()
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigurationError(LivedocError):
    """Raised when there is an issue with the application configuration."""
    pass


class ServiceError(LivedocError):
    """Base exception for errors occurring in service layers."""
    pass


class ServiceUnavailableError(ServiceError):
    """Raised when a required external service (e.g., Neo4j) is unavailable."""
    pass


class GraphError(LivedocError):
    """Base exception for feature graph queries."""
    pass


class FeatureNotFoundError(GraphError):
    """Raised when a requested feature does not exist in the queried scope."""

    def __init__(self, product: str, feature_name: str, version: str):
        super().__init__(
            f"Feature '{feature_name}' not found in {product}@{version}",
            error_code="FEATURE_NOT_FOUND",
            suggestions=["Check the product, feature title and version for typos"],
            context={"product": product, "feature_name": feature_name, "version": version},
        )
        self.product = product
        self.feature_name = feature_name
        self.version = version


class AmbiguousSignatureOwnerError(GraphError):
    """Raised in strict mode when several features declare the same signature."""

    def __init__(self, signature: str, owners: list[Any]):
        super().__init__(
            f"Signature '{signature}' is declared by {len(owners)} features",
            error_code="AMBIGUOUS_SIGNATURE_OWNER",
            suggestions=["Declare each direct invocation signature on a single feature"],
            context={"signature": signature, "owners": [str(owner) for owner in owners]},
        )
        self.signature = signature
        self.owners = owners
