"""
Shared helpers for console output and node rendering.
"""
