"""Analemma Visualizer.

Computes the solar positions behind an interactive 3D analemma view: the
figure-eight traced by the sun at a fixed clock time over a year, and the
sun's path across a single day, for a fixed observer.
"""

__version__ = "1.0.0"
__author__ = "Analemma Project"
