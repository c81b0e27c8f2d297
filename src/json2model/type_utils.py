# type_utils.py
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# Dart scalar types that decode from JSON without a custom factory
DART_PRIMITIVE_TYPES = frozenset({
    "int",
    "double",
    "num",
    "String",
    "bool",
})

# Primitive item types that need a numeric coercion instead of a plain cast
# (JSON integers like 3 are not doubles in Dart)
NUMERIC_COERCIONS = {
    "double": "(e as num).toDouble()",
}

ASYNC_WRAPPER = "Future"
LIST_TYPE = "List"


@dataclass(frozen=True)
class TypeExpr:
    """Parsed type expression: Ident ('<' TypeExpr (',' TypeExpr)* '>')? '?'?"""
    name: str
    args: Tuple["TypeExpr", ...] = ()
    nullable: bool = False
    # Raw text between the outermost '<' and its balancing '>'
    args_text: Optional[str] = None

    @property
    def is_generic(self):
        return self.args_text is not None


class _TypeParser:
    """Small recursive-descent parser over a Dart type expression string."""

    def __init__(self, text):
        self.text = text
        self.pos = 0

    def _skip_ws(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self):
        self._skip_ws()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _expect(self, ch):
        if self._peek() != ch:
            raise ValueError(f"expected '{ch}' at {self.pos} in {self.text!r}")
        self.pos += 1

    def _ident(self):
        self._skip_ws()
        start = self.pos
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            # Dotted names cover import prefixes like 'models.Task'
            if ch.isalnum() or ch in "_$.":
                self.pos += 1
            else:
                break
        name = self.text[start:self.pos]
        if not name or name[0].isdigit() or name.startswith(".") or name.endswith("."):
            raise ValueError(f"expected identifier at {start} in {self.text!r}")
        return name

    def parse_type(self):
        name = self._ident()
        args = []
        args_text = None
        if self._peek() == "<":
            self.pos += 1
            args_start = self.pos
            args.append(self.parse_type())
            while self._peek() == ",":
                self.pos += 1
                args.append(self.parse_type())
            self._skip_ws()
            args_text = self.text[args_start:self.pos].strip()
            self._expect(">")
        nullable = False
        if self._peek() == "?":
            self.pos += 1
            nullable = True
        return TypeExpr(name=name, args=tuple(args), nullable=nullable, args_text=args_text)

    def parse(self):
        expr = self.parse_type()
        if self._peek():
            raise ValueError(f"trailing text at {self.pos} in {self.text!r}")
        return expr


def parse_type_expr(type_str) -> Optional[TypeExpr]:
    """Parses a type string, returning None when it is not a well-formed type expression."""
    if not type_str:
        return None
    try:
        return _TypeParser(type_str).parse()
    except (ValueError, RecursionError) as e:
        logger.debug(f"Not a parseable type expression: {e}")
        return None


def render_type_expr(expr: TypeExpr, nullable=True):
    text = expr.name
    if expr.is_generic:
        text += f"<{', '.join(render_type_expr(arg, nullable) for arg in expr.args)}>"
    if nullable and expr.nullable:
        text += "?"
    return text


def non_nullable(type_str):
    """
    Drops every '?' from a type expression: 'Future<BaseResult<Task?>>?' -> 'Future<BaseResult<Task>>'.
    Text without a '?' is returned untouched.
    """
    if not type_str or "?" not in type_str:
        return type_str
    expr = parse_type_expr(type_str)
    if expr is None:
        return type_str.rstrip().rstrip("?")
    return render_type_expr(expr, nullable=False)


def strip_async_wrapper(type_str):
    """'Future<X>' (or 'Future<X>?') -> 'X'; anything else is returned unchanged."""
    expr = parse_type_expr(type_str)
    if expr and expr.name == ASYNC_WRAPPER and len(expr.args) == 1:
        return expr.args_text
    return type_str


def split_generic(type_str) -> Tuple[Optional[str], Optional[str]]:
    """
    Splits 'Outer<Inner>' into ('Outer', 'Inner'), with Inner running to the bracket
    that balances the first '<'. Non-generic or malformed input gives (None, None).
    """
    expr = parse_type_expr(type_str)
    if expr is None or not expr.is_generic or expr.nullable:
        return None, None
    return expr.name, expr.args_text


def list_item_identifier(type_str) -> Optional[str]:
    """'List<Task>' -> 'Task'. Only a bare identifier item counts; 'List<List<int>>' gives None."""
    expr = parse_type_expr(type_str)
    if expr is None or expr.name != LIST_TYPE or expr.nullable or len(expr.args) != 1:
        return None
    item = expr.args[0]
    if item.is_generic or item.nullable:
        return None
    return item.name


def is_primitive(type_name, primitive_names=DART_PRIMITIVE_TYPES):
    return type_name in primitive_names
