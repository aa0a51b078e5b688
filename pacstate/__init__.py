"""pacstate — declarative package-state reconciler for pacman."""

__version__ = "0.1.0"
