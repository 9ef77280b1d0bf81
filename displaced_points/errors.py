class DisplacedPointsError(Exception):
    """Base class for the errors raised by displaced_points."""


class ConfigurationError(DisplacedPointsError, ValueError):
    """Invalid orchestrator configuration, e.g. an unknown placement method or a non-positive marker radius."""


class InputError(DisplacedPointsError, ValueError):
    """Invalid input handed to the core, e.g. a non-point geometry, a non-finite coordinate or a bad resolution."""
