"""praise2slides: turn praise form submissions into slides in a shared deck."""

__version__ = "0.1.0"
