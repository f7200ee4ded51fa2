"""
Core utilities — shared exceptions used by the API server and entrypoints.
"""
