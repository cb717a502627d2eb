"""
Rewriter Package.

- `interface`: the `Rule` value and the `RewriteResult` variants.
- `decorators`: syntactic decorator name resolution and removal.
- `dispatch`: the composed traversal applying rules to a tree.
- `pipeline`: the `RewriterPipeline` orchestrating a rule registry.
"""
