"""
Domain models for document intelligence.
"""
