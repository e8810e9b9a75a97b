"""Shared exceptions for service layer operations."""


class FilterEvaluationError(Exception):
    """
    Raised when a filter expression cannot be evaluated.

    Covers syntax errors, references to undefined names, sandbox violations and
    runtime errors raised while evaluating against a user record. The filter
    turns this into an empty result plus the error for display.
    """

    def __init__(self, expression: str, message: str) -> None:
        self.expression = expression
        super().__init__(message)


class InvalidUsernameError(Exception):
    """Raised when a username cannot name a file inside the accounts directory."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Invalid username: {username!r}")
