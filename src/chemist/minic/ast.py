"""
Mini-C Abstract Syntax Tree (AST) Definitions
=============================================

This module defines the AST node types built by the parser and consumed
by the code generator.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root node, ordered list of functions
├── FunctionNode - function definition with its statement list
├── Statements
│   ├── ReturnStatement - return <value>
│   ├── VariableDeclaration - int name [= <value>]
│   ├── AssignmentStatement - name = <value>
│   └── CallExpression - bare call used as a statement
└── Values
    ├── NumberLiteral - integer constant
    ├── IdentifierExpression - variable reference
    └── CallExpression - call whose result is the value

Design Notes
------------
- All nodes are dataclasses carrying their source location
- The tree is a strict forest: every node has exactly one owner and
  there are no back-references
- Statement lists are plain Python lists in source order
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from chemist.errors import SourceLocation


# =============================================================================
# AST Node Base Class
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}@{self.location.line}:{self.location.column}"


# =============================================================================
# Value Nodes
# =============================================================================

@dataclass
class NumberLiteral(ASTNode):
    """
    Integer constant.

    Attributes:
        value: The integer value
    """
    value: int = 0


@dataclass
class IdentifierExpression(ASTNode):
    """
    Reference to a local variable.

    Attributes:
        name: The referenced variable name
    """
    name: str = ""


@dataclass
class CallExpression(ASTNode):
    """
    Parameterless function call.

    Appears both as a value (its result arrives in the accumulator)
    and directly in a statement list as a bare call.

    Attributes:
        function_name: Name of the called function
    """
    function_name: str = ""


Value = Union[NumberLiteral, IdentifierExpression, CallExpression]


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class ReturnStatement(ASTNode):
    """
    Return statement.

    Attributes:
        value: The returned value
    """
    value: Optional[Value] = None


@dataclass
class VariableDeclaration(ASTNode):
    """
    Local integer variable declaration.

    Represents declarations like:
        int x;
        int y = 10;
        int z = compute();

    Attributes:
        name: Variable name
        initializer: Optional initial value
    """
    name: str = ""
    initializer: Optional[Value] = None


@dataclass
class AssignmentStatement(ASTNode):
    """
    Assignment to an existing variable.

    Attributes:
        name: Target variable name
        value: The assigned value
    """
    name: str = ""
    value: Optional[Value] = None


Statement = Union[ReturnStatement, VariableDeclaration, AssignmentStatement, CallExpression]


# =============================================================================
# Declarations
# =============================================================================

@dataclass
class FunctionNode(ASTNode):
    """
    Function definition.

    Attributes:
        name: Function name
        body: Statements in source order
    """
    name: str = ""
    body: list[Statement] = field(default_factory=list)

    @property
    def declarations(self) -> list[VariableDeclaration]:
        """Local variable declarations in declaration order."""
        return [stmt for stmt in self.body if isinstance(stmt, VariableDeclaration)]


@dataclass
class ProgramNode(ASTNode):
    """
    Root node of the AST.

    Attributes:
        functions: Function definitions in source order
    """
    functions: list[FunctionNode] = field(default_factory=list)

    def find_function(self, name: str) -> Optional[FunctionNode]:
        """Return the first function called `name`, or None."""
        for func in self.functions:
            if func.name == name:
                return func
        return None


# =============================================================================
# AST Visitor Base Class
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_<NodeClass> methods; unhandled nodes fall
    back to generic_visit, which visits the node's children.
    """

    def visit(self, node: ASTNode):
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all child nodes."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, list):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(ast))

    Example output:
        Program
          Function: add
            Return 5
          Function: main
            Variable: x = add()
            Return x
    """

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

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit("Program")
        self.indent_level += 1
        for func in node.functions:
            self.visit(func)
        self.indent_level -= 1

    def visit_FunctionNode(self, node: FunctionNode):
        self._emit(f"Function: {node.name}")
        self.indent_level += 1
        for stmt in node.body:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_ReturnStatement(self, node: ReturnStatement):
        self._emit(f"Return {self._value_str(node.value)}")

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        init = f" = {self._value_str(node.initializer)}" if node.initializer else ""
        self._emit(f"Variable: {node.name}{init}")

    def visit_AssignmentStatement(self, node: AssignmentStatement):
        self._emit(f"Assign: {node.name} = {self._value_str(node.value)}")

    def visit_CallExpression(self, node: CallExpression):
        self._emit(f"Call: {node.function_name}()")

    def _value_str(self, value: Optional[ASTNode]) -> str:
        """Convert a value node to its source-like form."""
        if value is None:
            return ""
        if isinstance(value, NumberLiteral):
            return str(value.value)
        if isinstance(value, IdentifierExpression):
            return value.name
        if isinstance(value, CallExpression):
            return f"{value.function_name}()"
        return f"<{type(value).__name__}>"
