"""Exceptions raised by ragnar_state."""


class RagnarStateError(Exception):
    """Base class for all ragnar_state errors."""


class KinematicsError(RagnarStateError):
    """The forward-kinematics solver could not produce a pose."""


class DegenerateGeometryError(RagnarStateError, ValueError):
    """A link frame is undefined for the given points and reference axis.

    Raised for zero-length segments and for reference axes parallel to the
    link direction, instead of returning a transform full of NaNs.
    """
