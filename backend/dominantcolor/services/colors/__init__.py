"""
Dominant Colors Module

Provides K-means dominant color estimation for decoded images: seeding,
iterative refinement, and brightness-bounded cluster selection.
"""

__version__ = "1.0.0"
