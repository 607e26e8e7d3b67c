"""Exception types raised by opwpy.

An unreachable pose is not an error: ``OPWSolver.inverse`` reports it with
``IKResultCode.NO_SOLUTION`` instead.
"""


class OPWError(Exception):
    """Base class for all opwpy errors."""


class ConfigurationError(OPWError, ValueError):
    """Missing or invalid geometry, joint-limit or joint-name data."""


class UsageError(OPWError, ValueError):
    """Malformed call arguments such as a wrong-length joint vector."""
