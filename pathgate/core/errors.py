"""Exception hierarchy for pathgate.

Validation failures subclass ``ValueError`` so callers that already treat
sandbox rejections as bad input (``except ValueError``) keep working.
Filesystem failures on an already-validated path are plain ``OSError`` and
are never wrapped.
"""


class PathGateError(Exception):
    """Base class for all pathgate errors."""


class InitializationError(PathGateError):
    """Raised when the base directory cannot be resolved to an absolute path."""


class PolicyNotInitializedError(InitializationError):
    """Raised when a policy is requested before one has been initialized."""


class InvalidPatternError(PathGateError, ValueError):
    """Raised when a whitelist pattern is empty or does not compile."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid whitelist pattern {pattern!r}: {reason}")


class PathValidationError(PathGateError, ValueError):
    """Base class for rejections of a caller-supplied raw path."""

    def __init__(self, raw_path: str, message: str):
        self.raw_path = raw_path
        super().__init__(message)


class EmptyPathError(PathValidationError):
    """Raised when the raw path is the empty string."""

    def __init__(self, raw_path: str = ""):
        super().__init__(raw_path, "Path must not be empty")


class AbsolutePathRejected(PathValidationError):
    """Raised when the raw path starts with an absolute-path marker."""

    def __init__(self, raw_path: str):
        super().__init__(
            raw_path,
            f"Absolute paths not allowed in sandbox. Use paths relative to the base directory. Got: {raw_path}",
        )


class TraversalDetected(PathValidationError):
    """Raised when a parent reference climbs out of the raw path in relative mode."""

    def __init__(self, raw_path: str):
        super().__init__(raw_path, f"Path traversal (..) not allowed in sandbox. Got: {raw_path}")


class PatternMismatchError(PathValidationError):
    """Raised when the raw path does not match the enforced whitelist pattern."""

    def __init__(self, raw_path: str, pattern: str):
        self.pattern = pattern
        super().__init__(raw_path, f"Path does not match whitelist pattern {pattern!r}. Got: {raw_path}")


class PathEscapeError(PathValidationError):
    """Raised when the normalized path lands outside the base directory."""

    def __init__(self, raw_path: str, base_directory: str, resolved: str):
        self.base_directory = base_directory
        self.resolved = resolved
        super().__init__(
            raw_path,
            f"Path resolves outside base directory. Base: {base_directory}, Path: {resolved}",
        )


class NullByteRejected(PathValidationError):
    """Raised when the raw path contains a NUL character."""

    def __init__(self, raw_path: str):
        super().__init__(raw_path, f"Path must not contain a null byte. Got: {raw_path!r}")
