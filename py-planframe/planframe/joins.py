"""Join operations for planframe: join-type resolution and DataFrame.join."""

import enum
import logging
from typing import Dict, Sequence, Tuple

from .errors import UnknownJoinType

logger = logging.getLogger(__name__)


class JoinType(enum.Enum):
    """Relational join semantics understood by the engine."""

    INNER = "Inner"
    LEFT = "Left"
    RIGHT = "Right"
    FULL = "Full"
    LEFT_SEMI = "LeftSemi"
    LEFT_ANTI = "LeftAnti"
    RIGHT_SEMI = "RightSemi"

    @property
    def label(self) -> str:
        return self.value


# Host-facing ``how`` tokens.
JOIN_TYPES: Dict[str, JoinType] = {
    "inner": JoinType.INNER,
    "left": JoinType.LEFT,
    "right": JoinType.RIGHT,
    "full": JoinType.FULL,
    "semi": JoinType.LEFT_SEMI,
    "anti": JoinType.LEFT_ANTI,
    "right_semi": JoinType.RIGHT_SEMI,
}


def resolve_join_type(how: str) -> JoinType:
    """
    Map a ``how`` token to its JoinType.

    Tokens are matched exactly: "inner", "left", "right", "full", "semi",
    "anti" and "right_semi".

    Raises:
        UnknownJoinType: If ``how`` is any other value
    """
    try:
        return JOIN_TYPES[how]
    except (KeyError, TypeError):
        raise UnknownJoinType(how) from None


def _validate_join_keys(join_keys) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """Split ``(left_names, right_names)`` into two tuples of column names."""
    try:
        left_on, right_on = join_keys
    except (TypeError, ValueError):
        raise TypeError(
            "join_keys must be a pair (left_names, right_names), "
            f"got {type(join_keys).__name__}"
        ) from None

    result = []
    for keys in (left_on, right_on):
        if isinstance(keys, str):
            keys = (keys,)
        keys = tuple(keys)
        for key in keys:
            if not isinstance(key, str):
                raise TypeError(
                    f"Join key names must be str, got {type(key).__name__}"
                )
        result.append(keys)
    return result[0], result[1]


class JoinMixin:
    """Mixin class providing join operations for DataFrame."""

    def join(
        self,
        right: "DataFrame",
        join_keys: Tuple[Sequence[str], Sequence[str]],
        how: str = "inner",
    ) -> "DataFrame":
        """
        Equality join with another DataFrame on paired key columns.

        The join type is resolved before anything else, so an unknown ``how``
        fails even when the rest of the call is valid. Key names are resolved
        by the engine; the two key lists are paired position by position.

        Args:
            right: DataFrame to join with
            join_keys: ``(left_names, right_names)``
            how: "inner", "left", "right", "full", "semi", "anti" or
                "right_semi"

        Returns:
            New DataFrame over the joined plan

        Raises:
            UnknownJoinType: If ``how`` is not a supported token

        Example:
            >>> users.join(orders, (["id"], ["user_id"]), how="left")
        """
        from .plan import Join

        join_type = resolve_join_type(how)

        if not isinstance(right, type(self)):
            raise TypeError(
                f"join() argument must be DataFrame, got {type(right).__name__}"
            )
        if right._session is not self._session:
            raise ValueError("Cannot join DataFrames from different sessions")

        left_on, right_on = _validate_join_keys(join_keys)
        logger.debug("join %s on %s = %s", join_type.label, left_on, right_on)
        return self._derive(Join(self._plan, right._plan, join_type, left_on, right_on))
