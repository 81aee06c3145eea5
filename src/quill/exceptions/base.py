from __future__ import annotations


class QuillError(Exception):
    """Base exception class for all Quill-specific errors.

    This is the root of the Quill exception hierarchy. Catching it at an
    application boundary catches every error raised deliberately by the
    library while letting system exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            tree = parse(text)
        except QuillError as e:
            logger.error(f"Template error: {e.message}")
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the QuillError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
