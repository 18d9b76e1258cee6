"""xees - keep xscreensaver from locking the screen for a while."""

__version__ = "0.1.0"
