"""Template errors."""


class TemplateError(Exception):
    """Exception raised for template loading and rendering errors."""

    pass


class TemplateNotFoundError(TemplateError):
    """No template exists under the requested name or path."""

    def __init__(self, identifier: str, available: list[str] | None = None) -> None:
        self.identifier = identifier
        self.available = available or []
        message = f'Template "{identifier}" not found'
        if self.available:
            message += f". Available templates: {', '.join(self.available)}"
        super().__init__(message)


class InvalidTemplateError(TemplateError):
    """The template exists but is not a usable template."""

    def __init__(self, identifier: str, reason: str) -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f'Invalid template "{identifier}": {reason}')
