"""Core data structures for the Ragnar state publisher.

This module provides the immutable, JAX-native containers shared by the
frame builders and the publisher.
"""

from .axis_table import AxisTable, base_joint_axis, build_axis_table
from .chain_points import IntermediatePoints, KinematicsSolution

__all__ = [
    "AxisTable",
    "base_joint_axis",
    "build_axis_table",
    "IntermediatePoints",
    "KinematicsSolution",
]
