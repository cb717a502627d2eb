"""
Core lowering machinery: diagnostics, rule registry, dispatch engine and the
source-level engine.
"""
