"""randkeep - random values that stay put once they are in managed state."""

__version__ = "0.1.0"
