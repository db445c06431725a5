"""
Overlay Errors
==============

Bounded Context: Construction-time validation.

The geometry engine has a single failure mode: an invalid configuration
detected while building descriptors or overlay configs. Resolution itself
never raises; degenerate geometry is clamped instead.
"""


class InvalidConfigurationError(ValueError):
    """Raised when a descriptor or overlay config violates an invariant."""
    pass
