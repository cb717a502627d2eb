"""
Command line interface for decorator-lowering.
"""
