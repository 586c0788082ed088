"""Custom exceptions for depwise with user-friendly error messages."""


class DepwiseError(Exception):
    """Base exception with user-friendly message and optional hint.

    Attributes:
        message: The main error message.
        hint: Optional hint for resolving the error.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        """Initialize the exception.

        Args:
            message: The main error message.
            hint: Optional hint for resolving the error.
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ConfigurationError(DepwiseError):
    """Invalid configuration."""

    pass


class MissingCredentialError(ConfigurationError):
    """A backend was configured without its required credential."""

    def __init__(
        self,
        backend: str,
        env_var: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"{backend} API key is required"
        if not hint and env_var:
            hint = f"Set {env_var} in your environment or the api_key field in .depwise.yml."
        self.backend = backend
        super().__init__(message, hint)


class TransportError(DepwiseError):
    """A backend could not be reached or rejected the request."""

    def __init__(self, service: str, message: str, hint: str = "") -> None:
        self.service = service
        super().__init__(message, hint)


class BackendConnectionError(TransportError):
    """Network connectivity issue while talking to a backend."""

    def __init__(
        self,
        service: str,
        original_error: Exception | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Failed to reach {service}"
            if original_error:
                message += f": {original_error}"
        if not hint:
            hint = "Check the backend base URL, your network connection and firewall settings."
        self.original_error = original_error
        super().__init__(service, message, hint)


class BackendTimeoutError(TransportError):
    """A backend did not answer within its configured timeout."""

    def __init__(
        self,
        service: str,
        timeout: float | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            if timeout:
                message = f"{service} request timed out after {timeout:.1f} seconds"
            else:
                message = f"{service} request timed out"
        if not hint:
            hint = "Increase the backend timeout or check the backend's load."
        self.timeout = timeout
        super().__init__(service, message, hint)


class BackendAuthenticationError(TransportError):
    """Authentication failed - missing, invalid or unauthorized credentials."""

    def __init__(
        self,
        service: str,
        detail: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"{service} authentication failed"
            if detail:
                message += f": {detail}"
        if not hint:
            hint = f"Verify the {service} API key and its permissions."
        super().__init__(service, message, hint)


class BackendRateLimitError(TransportError):
    """Backend rate limit or quota exceeded."""

    def __init__(
        self,
        service: str,
        retry_after: float | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            if retry_after:
                message = f"{service} rate limit exceeded. Retry after {retry_after:g} seconds."
            else:
                message = f"{service} rate limit exceeded."
        if not hint:
            hint = "Wait before retrying or check the account's quota."
        self.retry_after = retry_after
        super().__init__(service, message, hint)


class BackendStatusError(TransportError):
    """Backend answered with a non-success HTTP status."""

    def __init__(
        self,
        service: str,
        status_code: int,
        detail: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"{service} API request failed with status {status_code}"
            if detail:
                message += f": {detail}"
        self.status_code = status_code
        super().__init__(service, message, hint)


class ResponseParseError(DepwiseError):
    """A backend reply did not contain a well-formed JSON object of the expected shape."""

    def __init__(
        self,
        service: str = "",
        detail: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Failed to parse {service} response" if service else "Failed to parse response"
            if detail:
                message += f": {detail}"
        if not hint:
            hint = "The model did not return the requested JSON; a different model or a retry may help."
        self.service = service
        super().__init__(message, hint)


class AnalysisError(DepwiseError):
    """Error during dependency update analysis."""

    pass


class NoAnalyzerAvailableError(AnalysisError):
    """None of the configured analyzers was registered and reachable."""

    def __init__(
        self,
        order: list[str] | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            if order:
                message = f"No analyzer available (tried: {', '.join(order)})"
            else:
                message = "No analyzer configured"
        if not hint:
            hint = "Enable the heuristic fallback or configure a reachable backend."
        self.order = order or []
        super().__init__(message, hint)


class AllAnalyzersFailedError(AnalysisError):
    """Every configured analyzer failed; wraps the most recent cause."""

    def __init__(
        self,
        last_error: Exception,
        attempted: list[str] | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"All analyzers failed: {last_error}"
        self.last_error = last_error
        self.attempted = attempted or []
        super().__init__(message, hint)


class AnalysisCancelledError(DepwiseError):
    """The caller's deadline or cancellation fired before analysis finished."""

    pass


class DeadlineExceededError(AnalysisCancelledError):
    """The per-call analysis deadline expired."""

    def __init__(
        self,
        timeout: float | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            if timeout is not None:
                message = f"Analysis deadline of {timeout:g} seconds exceeded"
            else:
                message = "Analysis deadline exceeded"
        self.timeout = timeout
        super().__init__(message, hint)
