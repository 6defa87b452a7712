"""Custom exceptions for headerscope."""


class HeaderscopeError(Exception):
    """Base exception for all headerscope errors."""

    pass


class ConfigError(HeaderscopeError):
    """Raised when the configuration file cannot be used."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path:
            message = f"{message} ({path})"
        super().__init__(message)


class InvalidSchemaVersionError(HeaderscopeError):
    """Raised when config has an unsupported schema version."""

    def __init__(self, found: int, supported: int):
        self.found = found
        self.supported = supported
        super().__init__(
            f"Unsupported schema version {found}. This tool supports version {supported}."
        )


class SourceReadError(HeaderscopeError):
    """Raised when a source file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to read {path}: {reason}")


class GitError(HeaderscopeError):
    """Raised when a git operation fails."""

    def __init__(self, command: str, stderr: str):
        self.command = command
        self.stderr = stderr
        super().__init__(f"Git command failed: {command}\n{stderr}")


class NotAGitRepoError(HeaderscopeError):
    """Raised when not inside a git repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not a git repository: {path}")


class InvalidDiffRangeError(HeaderscopeError):
    """Raised when no diff range can be resolved."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Cannot resolve diff range: {reason}")
