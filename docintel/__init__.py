"""
docintel: rule-based document intelligence.
"""

__version__ = "0.1.0"
