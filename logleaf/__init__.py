"""LogLeaf: recover structured health data from timeline posts."""

__version__ = "0.1.0"
