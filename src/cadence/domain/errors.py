"""Exception hierarchy for cadence."""


class CadenceError(Exception):
    """Base class for all cadence errors."""


class StoreError(CadenceError):
    """A review store could not be read or written."""


class UnknownTierError(CadenceError, ValueError):
    """A difficulty label is not one of the known tiers."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Unknown difficulty tier: {label!r}")
