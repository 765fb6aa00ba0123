"""Error Hierarchy - Exceptions raised by the interaction engine

All engine exceptions derive from :class:`ClinavError`, so hosts can catch a
single base class. The propagation policy is:

    - **StructuralError**: the command catalog is cyclic or malformed. Raised
      while building the catalog, before any UI is shown.
    - **RenderError**: the renderer failed (terminal I/O, closed input). The
      controller runs ``cleanup()`` and lets the error bubble.
    - **ValidationError**: a parameter value was rejected. Recovered locally
      by the form engine, which refuses to commit and keeps editing.
    - **CancellationError**: the operator cancelled. Sessions report this as
      ``SessionResult.cancelled``; the exception only exists for hosts that
      prefer to raise (see :meth:`SessionResult.raise_if_cancelled`).
    - **ConfigurationError**: invalid configuration file or theme name.

.. seealso::
   :mod:`clinav.engine.controller` : Session sequencing and error handling
"""


class ClinavError(Exception):
    """Base exception for all clinav errors.

    :param message: Human-readable description of the failure
    :param suggestion: Optional hint shown to the operator
    """

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion

    def __str__(self) -> str:
        return self.message


class StructuralError(ClinavError):
    """Raised when a command definition tree is cyclic or malformed."""

    pass


class RenderError(ClinavError):
    """Raised when the renderer cannot draw or read input."""

    pass


class ValidationError(ClinavError):
    """Raised when a parameter value fails its type or validator check.

    :param message: Why the value was rejected
    :param parameter: Name of the rejected parameter, when known
    """

    def __init__(self, message: str, parameter: str | None = None, suggestion: str | None = None):
        super().__init__(message, suggestion)
        self.parameter = parameter


class CancellationError(ClinavError):
    """Operator-initiated termination of a session."""

    pass


class ConfigurationError(ClinavError):
    """Exception for configuration-related errors.

    Raised when configuration files are invalid, contain unknown settings, or
    name a theme that does not exist.
    """

    pass
