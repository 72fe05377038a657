"""chatmod — auto-moderation for outgoing chat messages."""

__version__ = "0.1.0"
