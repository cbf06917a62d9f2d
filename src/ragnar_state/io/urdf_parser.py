"""URDF reading for the robot model the frames are published against.

Only the link names are needed: the publisher checks that every frame it
will send exists in the robot description before it starts.
"""

from pathlib import Path
from typing import Tuple

from lxml import etree


def load_link_names(urdf_path: str) -> Tuple[str, ...]:
    """Return the names of all links in a URDF, in document order.

    Args:
        urdf_path: Path to the URDF file.

    Returns:
        Tuple of link names.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the file is not a URDF robot or has unnamed or
            duplicate links.
    """
    if not Path(urdf_path).exists():
        raise FileNotFoundError(f"URDF file not found: {urdf_path}")

    root = etree.parse(urdf_path).getroot()
    if root.tag != 'robot':
        raise ValueError(f"Expected <robot> root element, found <{root.tag}>")

    names = []
    for link in root.findall('link'):
        name = link.get('name')
        if not name:
            raise ValueError("Found <link> element without a name")
        if name in names:
            raise ValueError(f"Duplicate link name '{name}'")
        names.append(name)

    return tuple(names)
