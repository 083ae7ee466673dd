"""
Analysis services.
"""
