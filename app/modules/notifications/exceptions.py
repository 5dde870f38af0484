"""Errors raised while composing notifications."""


class DataDependencyError(Exception):
    """A user, repository or patchset referenced by an event is unknown.

    Attributes:
        kind: What could not be resolved (``user``, ``repository``...)
        name: The identifier that was looked up
    """

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Unable to resolve {kind} '{name}'")


class ParseTimeout(Exception):
    """Structural markup parse exceeded its time bound."""
