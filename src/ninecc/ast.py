"""
ninecc Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the AST node types built by the parser and consumed
by the code generator.

Node Hierarchy
--------------
ASTNode (base)
└── Expression
    ├── BinaryExpression - add, subtract, multiply, divide
    └── NumberLiteral - integer constant

Design Notes
------------
- All nodes are dataclasses
- Each node stores the source offset it was built from
- Binary nodes always own exactly two children, evaluated left then right
- Unary minus has no node of its own; the parser builds (0 - operand)
"""

from dataclasses import dataclass
from enum import Enum, auto


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        offset: Source offset of the token that produced this node
    """
    offset: int

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}@{self.offset}"


@dataclass
class Expression(ASTNode):
    """Base class for nodes that evaluate to an integer."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

class BinaryOperator(Enum):
    """Binary operator types."""
    ADD = auto()        # +
    SUBTRACT = auto()   # -
    MULTIPLY = auto()   # *
    DIVIDE = auto()     # /


OPERATOR_SYMBOLS: dict[BinaryOperator, str] = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
}


@dataclass
class BinaryExpression(Expression):
    """
    Binary operation expression (a op b).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator = None
    left: Expression = None
    right: Expression = None


@dataclass
class NumberLiteral(Expression):
    """
    Integer literal expression.

    Attributes:
        value: The integer value
    """
    value: int = 0


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care about.

    Usage:
        class LiteralCounter(ASTVisitor):
            def __init__(self):
                self.count = 0

            def visit_NumberLiteral(self, node):
                self.count += 1

        counter = LiteralCounter()
        counter.visit(tree)
    """

    def visit(self, node: ASTNode):
        """Dispatch to visit_<ClassName>, falling back to generic_visit."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all child nodes."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)

    def visit_BinaryExpression(self, node: BinaryExpression): return self.generic_visit(node)
    def visit_NumberLiteral(self, node: NumberLiteral): return self.generic_visit(node)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(tree))

    Example output for "1+2*3":
        Add
          Number 1
          Mul
            Number 2
            Number 3
    """

    NAMES = {
        BinaryOperator.ADD: "Add",
        BinaryOperator.SUBTRACT: "Sub",
        BinaryOperator.MULTIPLY: "Mul",
        BinaryOperator.DIVIDE: "Div",
    }

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_BinaryExpression(self, node: BinaryExpression):
        self._emit(self.NAMES.get(node.operator, "?"))
        self.indent_level += 1
        self.visit(node.left)
        self.visit(node.right)
        self.indent_level -= 1

    def visit_NumberLiteral(self, node: NumberLiteral):
        self._emit(f"Number {node.value}")


def format_expression(expr: Expression) -> str:
    """Render an expression as fully parenthesised infix text."""
    if isinstance(expr, NumberLiteral):
        return str(expr.value)
    if isinstance(expr, BinaryExpression):
        op_str = OPERATOR_SYMBOLS.get(expr.operator, "?")
        return f"({format_expression(expr.left)} {op_str} {format_expression(expr.right)})"
    return f"<{type(expr).__name__}>"


def count_nodes(expr: Expression) -> int:
    """Return the number of nodes in the tree rooted at expr."""
    if isinstance(expr, BinaryExpression):
        return 1 + count_nodes(expr.left) + count_nodes(expr.right)
    return 1
