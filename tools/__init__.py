"""
ECIES Tools Package

Command-line entry points.
"""
