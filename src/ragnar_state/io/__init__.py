"""I/O utilities for the robot description the link frames belong to."""

from .urdf_parser import load_link_names

__all__ = ["load_link_names"]
