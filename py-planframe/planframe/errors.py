"""Exception types raised by planframe."""


class PlanframeError(Exception):
    """Base class for every error raised by this package."""


class InvalidIndexType(PlanframeError, TypeError):
    """DataFrame indexed with something other than a name or names."""

    def __init__(self, key):
        self.key = key
        super().__init__(
            "DataFrame can only be indexed by string index or indices, "
            f"got {type(key).__name__}"
        )


class UnknownJoinType(PlanframeError, ValueError):
    """Join ``how`` token outside the supported vocabulary."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(
            f"The join type {token} does not exist or is not implemented"
        )


class UnresolvedWindowFunction(PlanframeError, ValueError):
    """``window()`` was given a name that matches no window function."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"There is no window function named {name}")


class EngineError(PlanframeError, RuntimeError):
    """
    Failure reported by the query engine.

    When the engine raised, the message is the engine's own, unchanged, and
    the original exception is chained as ``__cause__``. Problems the adapter
    detects itself while lowering a plan (wrong argument counts, non-literal
    window arguments) carry planframe's message and no ``__cause__``.
    """


class FormattingError(PlanframeError, ValueError):
    """Failure while rendering record batches as text."""
