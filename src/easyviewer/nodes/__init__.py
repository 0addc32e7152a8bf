"""Immutable AST for marker expressions.

Parser output:      Const, Name, List, Dict, Getattr, OptionalGetattr,
                    Getitem, FuncCall, BinOp, UnaryOp, Compare, BoolOp,
                    CondExpr, NullCoalesce, Declare, Assign, Program
Rewriter output:    ContextLoad, ContextRoot, ContextStore
"""

from easyviewer.nodes.base import Node
from easyviewer.nodes.expressions import (
    BinOp,
    BoolOp,
    Compare,
    CondExpr,
    Const,
    ContextLoad,
    ContextRoot,
    Dict,
    Expr,
    FuncCall,
    Getattr,
    Getitem,
    List,
    Name,
    NullCoalesce,
    OptionalGetattr,
    UnaryOp,
)
from easyviewer.nodes.statements import (
    Assign,
    ContextStore,
    Declare,
    Program,
    Statement,
)

__all__ = [
    "Assign",
    "BinOp",
    "BoolOp",
    "Compare",
    "CondExpr",
    "Const",
    "ContextLoad",
    "ContextRoot",
    "ContextStore",
    "Declare",
    "Dict",
    "Expr",
    "FuncCall",
    "Getattr",
    "Getitem",
    "List",
    "Name",
    "Node",
    "NullCoalesce",
    "OptionalGetattr",
    "Program",
    "Statement",
    "UnaryOp",
]
