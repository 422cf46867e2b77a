"""Line-oriented text style checks with autofix support."""

__version__ = "0.1.0"
