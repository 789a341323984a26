"""Feature tracking bookkeeping, depth recovery, dataset replay and geometry helpers for visual-inertial navigation."""

__version__ = "0.1.0"

__all__ = [
    "colormap",
    "dataset",
    "depth",
    "mathutil",
    "messages",
    "parameters",
    "quaternion",
    "timing",
    "tracker",
    "tracker_node",
    "trajectory",
    "transform",
    "utm",
]