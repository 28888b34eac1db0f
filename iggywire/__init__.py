"""Models, binary codecs and S2 compression for the Iggy message streaming wire protocol."""

__version__ = "0.1.0"