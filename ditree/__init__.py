"""
ditree - Print Docker images as a tree of parent/child derivations.
"""

__version__ = "1.0.0"
__author__ = "ditree"
__description__ = "Docker image derivation tree with attached containers"
