"""Pommai: spoken Tamil command resolution with continuous listening."""

__version__ = "0.1.0"
