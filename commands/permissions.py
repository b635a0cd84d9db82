"""
Permission Checker
Pure capability checks for the dispatch policy chain
"""

from typing import Any, FrozenSet, Iterable, NamedTuple, Optional

ADMINISTRATOR = "ADMINISTRATOR"


class PermissionResult(NamedTuple):
    """Outcome of a permission check."""

    allowed: bool
    missing: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


class PermissionChecker:
    """
    Compares required capability tokens against held ones.

    Holds no state and does no I/O. Callers resolve the held capabilities
    from the gateway (see ``capabilities``) and pass them in.
    """

    def check(
        self,
        required: Iterable[str],
        held: Iterable[str],
        location: Any = None,
    ) -> PermissionResult:
        """
        Check whether ``held`` covers ``required``.

        Args:
            required: Capability tokens the command needs
            held: Capability tokens the entity has in this location
            location: Invocation location; inside a guild ``ADMINISTRATOR``
                implies every other capability

        Returns:
            PermissionResult with the first missing token (sorted order)
        """
        required = frozenset(required)
        if not required:
            return PermissionResult(True)

        held = frozenset(held)
        in_guild = location is not None and getattr(location, "guild_id", None) is not None
        if in_guild and ADMINISTRATOR in held:
            return PermissionResult(True)

        missing = sorted(required - held)
        if missing:
            return PermissionResult(False, missing[0])
        return PermissionResult(True)

    @staticmethod
    def display_name(token: str) -> str:
        """``MANAGE_GUILD`` -> ``Manage Guild``"""
        return token.replace("_", " ").title()

    @staticmethod
    def capabilities(permissions: Any) -> FrozenSet[str]:
        """
        Capability tokens granted by a ``discord.Permissions`` value.

        Args:
            permissions: ``discord.Permissions`` (or anything iterable as (flag, bool))

        Returns:
            Frozenset of upper-case flag names that are enabled
        """
        if permissions is None:
            return frozenset()
        return frozenset(name.upper() for name, enabled in permissions if enabled)
