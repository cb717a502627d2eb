"""
Custom Element Rule.

Lowers ``@customElement('x-foo')`` on a class into a plain member holding the
element's tag name. The tag name is taken from exactly one source, checked in
this fixed order:

1.  A class attribute named after the tag member (``is_ = 'x-foo'``).
2.  A getter (``property``/``staticmethod``/``classmethod``) of that name whose
    body returns an expression.
3.  The first argument of the decorator. Only in this case is a member
    synthesized::

        @staticmethod
        def is_():
            return 'x-foo'

    It becomes the first member of the class (after the docstring, which is
    not a member).

An attribute wins over a getter when both exist; that case is reported as a
warning. A decorator without an argument on a class with no other source is a
`MissingArgumentError`.
"""

from typing import Iterator, List, Optional, Union

import libcst as cst

from decorator_lowering.core.registry import register_rule
from decorator_lowering.core.rewriter.decorators import decorator_arguments, decorator_name
from decorator_lowering.core.rewriter.interface import Failed, Note, Replaced, RewriteResult, RuleContext, Unchanged
from decorator_lowering.enums import ErrorKind, RuleKind, Severity
from decorator_lowering.utils.node_text import node_source

CUSTOM_ELEMENT_NAMES = (
  "customElement",
  "Polymer.decorators.customElement",
  "custom_element",
  "polymer.decorators.custom_element",
)

GETTER_DECORATORS = frozenset({"property", "staticmethod", "classmethod"})

PropertyMember = Union[cst.Assign, cst.AnnAssign]


def is_class_def(node: cst.CSTNode) -> bool:
  return isinstance(node, cst.ClassDef)


def _small_statements(body: cst.BaseSuite) -> Iterator[cst.BaseSmallStatement]:
  """Yields the simple statements directly inside a suite (no nesting)."""
  if isinstance(body, cst.SimpleStatementSuite):
    yield from body.body
    return
  for stmt in body.body:
    if isinstance(stmt, cst.SimpleStatementLine):
      yield from stmt.body


def _is_name(node: cst.BaseExpression, name: str) -> bool:
  return isinstance(node, cst.Name) and node.value == name


def find_property(body: cst.BaseSuite, member: str) -> Optional[PropertyMember]:
  """
  Finds a class-level assignment to `member`, with or without a value.
  """
  for small in _small_statements(body):
    if isinstance(small, cst.Assign) and any(_is_name(t.target, member) for t in small.targets):
      return small
    if isinstance(small, cst.AnnAssign) and _is_name(small.target, member):
      return small
  return None


def find_accessor(body: cst.BaseSuite, member: str) -> Optional[cst.FunctionDef]:
  """
  Finds a getter method named `member`.
  """
  if not isinstance(body, cst.IndentedBlock):
    return None
  for stmt in body.body:
    if not isinstance(stmt, cst.FunctionDef) or stmt.name.value != member:
      continue
    if any(decorator_name(d) in GETTER_DECORATORS for d in stmt.decorators):
      return stmt
  return None


def returned_expression(func: cst.FunctionDef) -> Optional[cst.BaseExpression]:
  """Expression of the first top-level ``return`` in a function body."""
  for small in _small_statements(func.body):
    if isinstance(small, cst.Return):
      return small.value
  return None


def _tag_argument(decorator: cst.Decorator) -> Optional[cst.BaseExpression]:
  args = decorator_arguments(decorator)
  if not args or args[0].star:
    return None
  return args[0].value


def _is_docstring(stmt: cst.BaseStatement) -> bool:
  if not isinstance(stmt, cst.SimpleStatementLine) or len(stmt.body) != 1:
    return False
  small = stmt.body[0]
  return isinstance(small, cst.Expr) and isinstance(small.value, (cst.SimpleString, cst.ConcatenatedString))


def build_accessor(member: str, value: cst.BaseExpression) -> cst.FunctionDef:
  """
  Creates ``@staticmethod def <member>(): return <value>``.
  """
  return cst.FunctionDef(
    name=cst.Name(member),
    params=cst.Parameters(),
    body=cst.IndentedBlock(body=[cst.SimpleStatementLine(body=[cst.Return(value=value)])]),
    decorators=[cst.Decorator(decorator=cst.Name("staticmethod"))],
  )


def prepend_member(node: cst.ClassDef, member: cst.BaseStatement) -> cst.ClassDef:
  """
  Returns a copy of `node` with `member` as its first member.

  A one-line class (``class A: pass``) is expanded to an indented block.
  """
  body = node.body
  statements: List[cst.BaseStatement]

  if isinstance(body, cst.SimpleStatementSuite):
    statements = [cst.SimpleStatementLine(body=body.body)]
  else:
    statements = list(body.body)

  insert_at = 1 if statements and _is_docstring(statements[0]) else 0
  statements.insert(insert_at, member)

  if isinstance(body, cst.IndentedBlock):
    new_body = body.with_changes(body=statements)
  else:
    new_body = cst.IndentedBlock(header=body.trailing_whitespace, body=statements)

  return node.with_changes(body=new_body)


@register_rule(RuleKind.CUSTOM_ELEMENT, match_kinds=CUSTOM_ELEMENT_NAMES, applies_to=is_class_def)
def lower_custom_element(decorator: cst.Decorator, node: cst.ClassDef, ctx: RuleContext) -> RewriteResult:
  """
  Resolves the tag name of a custom element class.

  Args:
      decorator: The matched ``customElement`` decorator.
      node: The class, with the claimed decorators already removed.
      ctx: Rule context (provides the tag member name).

  Returns:
      `Unchanged` when the class already declares its tag name, `Replaced`
      with the synthesized accessor otherwise, `Failed` if no tag name can be
      found.
  """
  member = ctx.tag_member
  prop = find_property(node.body, member)
  accessor = find_accessor(node.body, member)
  notes: List[Note] = []

  if prop is not None and accessor is not None:
    notes.append(
      Note(
        f"both an attribute and an accessor named '{member}' exist; the attribute is used",
        severity=Severity.WARNING,
        kind=ErrorKind.AMBIGUOUS_SOURCE,
      )
    )

  if prop is not None:
    if prop.value is None:
      return Failed(ErrorKind.UNRESOLVED_TAG_NAME, f"'{member}' is declared without a value")
    tag = prop.value
    result_node = None
  elif accessor is not None:
    tag = returned_expression(accessor)
    if tag is None:
      return Failed(ErrorKind.UNRESOLVED_TAG_NAME, f"accessor '{member}' does not return a tag name")
    result_node = None
  else:
    tag = _tag_argument(decorator)
    if tag is None:
      return Failed(
        ErrorKind.MISSING_ARGUMENT,
        f"@{decorator_name(decorator)} requires a tag name argument when the class declares no '{member}'",
      )
    result_node = prepend_member(node, build_accessor(member, tag))

  tag_text = node_source(tag)
  notes.append(Note(f"tag name {tag_text}", value=tag_text))

  if result_node is None:
    return Unchanged(tuple(notes))
  return Replaced(result_node, tuple(notes))
