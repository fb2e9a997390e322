"""
Species Fetch - NCBI gene region retrieval for lists of species.
"""

__version__ = "1.0.0"
