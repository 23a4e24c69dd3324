"""Decompile a local Maven-style repository into synthesized source jars."""

__version__ = "0.1.0"
