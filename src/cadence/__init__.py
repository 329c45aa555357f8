"""cadence: spaced-repetition scheduling and adaptive difficulty."""

from cadence.consts import VERSION

__version__ = VERSION
