"""investsim: asset-timeline engine for a 20-year investing simulation game."""

__version__ = "0.1.0"
