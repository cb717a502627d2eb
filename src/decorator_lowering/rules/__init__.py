"""
Built-in Lowering Rules.

Each module in this package registers its rules with
`decorator_lowering.core.registry.register_rule` at import time. The registry
imports them on first access.
"""
