"""
Miffy Runner - side-scrolling runner simulation.

The simulation core runs headless; ``miffy_runner.simulator`` puts it in a
pygame window.
"""

__version__ = "0.1.0"
