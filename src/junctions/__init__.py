from . import borders, build, config, corners, degenerate, export_svg, geom, network, polygon

__all__ = [
    "geom",
    "config",
    "network",
    "borders",
    "degenerate",
    "corners",
    "polygon",
    "build",
    "export_svg",
]
