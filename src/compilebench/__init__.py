"""compilebench — measure compile times of real-world projects."""

__version__ = "0.1.0"
