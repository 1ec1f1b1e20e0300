"""
Design block service: requirement → design blocks → component designs → integrated design.
"""

__version__ = "0.1.0"
