# dart_scanner.py
"""
Lightweight scanner that pulls @JsonToModel declarations out of Dart source.

This is not a Dart parser. It understands just enough structure (comments, string
literals, bracket nesting, member boundaries) to recover class names, method
signatures and the annotation arguments. Anything it does not recognise as a
method (fields, getters, setters, constructors) is ignored.
"""
import logging
import re
from pathlib import Path

from .errors import DeclarationError
from .models import (NAMED, OPTIONAL_POSITIONAL, POSITIONAL, ClassDeclaration, EnvelopeConfig,
                     MethodSignature, Parameter)

logger = logging.getLogger(__name__)

ANNOTATION_NAME = "JsonToModel"
DYNAMIC_TYPE = "dynamic"

_STRING_OR_COMMENT_RE = re.compile(
    r"(?P<string>'''.*?'''|\"\"\".*?\"\"\"|'(?:\\.|[^'\\\n])*'|\"(?:\\.|[^\"\\\n])*\")"
    r"|(?P<comment>//[^\n]*|/\*.*?\*/)",
    re.DOTALL,
)
_ANNOTATION_RE = re.compile(r"@" + ANNOTATION_NAME + r"\s*\(")
_ANNOTATION_ARG_RE = re.compile(r"(\w+)\s*:\s*(?:'((?:\\.|[^'\\])*)'|\"((?:\\.|[^\"\\])*)\"|(null))")
_OTHER_ANNOTATION_RE = re.compile(r"@[\w.]+(?:\s*\()?")
_CLASS_HEADER_RE = re.compile(
    r"((?:(?:abstract|base|interface|final|sealed)\s+)*)(class|mixin\s+class|mixin|enum|extension(?:\s+type)?)\s+(\w+)")
_FUNCTION_HEADER_RE = re.compile(r"([^;{}()=]*?)\b(\w+)\s*(?:<[^()]*>)?\s*\(")
_MEMBER_NAME_RE = re.compile(r"(\w+)\s*$")
_LEADING_ANNOTATION_RE = re.compile(r"^@[\w.]+")
_BODY_START_RE = re.compile(r"(?:async\*?|sync\*)?\s*(?:\{|=>)")

_OPENERS = {"(": ")", "{": "}", "[": "]"}
_CLOSERS = {")", "}", "]"}
# Characters after a closing '}' that mean the member continues (e.g. a map literal initializer)
_CONTINUATION_CHARS = ";.,?)]"
_NON_METHOD_KEYWORDS = {"get", "set", "operator", "factory"}
_CONCRETE_MODIFIERS = {"static", "external"}
_PARAM_MODIFIERS = {"required", "covariant", "final", "var", "const"}


def strip_comments(text):
    """Removes // and /* */ comments, leaving string literals untouched."""
    def _replace(match):
        if match.group("comment") is not None:
            # Keep line count stable for diagnostics
            return "\n" * match.group("comment").count("\n") or " "
        return match.group("string")
    return _STRING_OR_COMMENT_RE.sub(_replace, text)


def _skip_string(text, pos):
    """Returns the index just past the string literal starting at pos."""
    quote = text[pos]
    if text.startswith(quote * 3, pos):
        end = text.find(quote * 3, pos + 3)
        return len(text) if end < 0 else end + 3
    i = pos + 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    return len(text)


def find_matching(text, open_pos):
    """Index of the bracket closing the one at open_pos, honouring nesting and string literals."""
    stack = []
    i = open_pos
    while i < len(text):
        ch = text[i]
        if ch in "'\"":
            i = _skip_string(text, i)
            continue
        if ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in _CLOSERS:
            if not stack or stack[-1] != ch:
                raise DeclarationError(f"Unbalanced '{ch}' at offset {i}")
            stack.pop()
            if not stack:
                return i
        i += 1
    raise DeclarationError(f"Unclosed '{text[open_pos]}' at offset {open_pos}")


def split_top_level(text, separator=","):
    """Splits on separator where no (), {}, [] or <> is open."""
    parts = []
    depth = 0
    angle = 0
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in "'\"":
            i = _skip_string(text, i)
            continue
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        elif ch == "<":
            angle += 1
        elif ch == ">" and angle > 0 and text[i - 1] != "=":
            angle -= 1
        elif ch == separator and depth == 0 and angle == 0:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return [p.strip() for p in parts if p.strip()]


def split_members(body):
    """Splits a class body into member declarations."""
    members = []
    depth = 0
    start = 0
    i = 0
    while i < len(body):
        ch = body[i]
        if ch in "'\"":
            i = _skip_string(body, i)
            continue
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
            if ch == "}" and depth == 0:
                rest = body[i + 1:].lstrip()
                if not rest or rest[0] not in _CONTINUATION_CHARS:
                    members.append(body[start:i + 1])
                    start = i + 1
        elif ch == ";" and depth == 0:
            members.append(body[start:i + 1])
            start = i + 1
        i += 1
    if body[start:].strip():
        members.append(body[start:])
    return [m.strip() for m in members if m.strip()]


def _strip_leading_annotations(text):
    text = text.strip()
    while True:
        match = _LEADING_ANNOTATION_RE.match(text)
        if not match:
            return text
        end = match.end()
        rest = text[end:].lstrip()
        if rest.startswith("("):
            paren = end + (len(text[end:]) - len(rest))
            end = find_matching(text, paren) + 1
        text = text[end:].strip()


def parse_parameter(text, kind=POSITIONAL):
    text = _strip_leading_annotations(text)
    default = None
    # Default values: '= value' (or the legacy ': value' for named parameters)
    for sep in ("=", ":"):
        pieces = split_top_level(text, sep)
        if len(pieces) > 1:
            text, default = pieces[0], sep.join(pieces[1:]).strip()
            break

    words = text.split()
    required = "required" in words
    while words and words[0] in _PARAM_MODIFIERS:
        words.pop(0)
    text = " ".join(words)

    match = _MEMBER_NAME_RE.search(text)
    if not match:
        raise DeclarationError(f"Cannot read parameter '{text}'")
    name = match.group(1)
    type_expr = text[:match.start()].strip() or DYNAMIC_TYPE
    return Parameter(type_expr=type_expr, name=name, kind=kind, required=required, default=default)


def parse_parameters(text):
    """Parses the text between a method's parentheses into Parameters."""
    params = []
    for part in split_top_level(text):
        if part[0] in "[{":
            kind = OPTIONAL_POSITIONAL if part[0] == "[" else NAMED
            inner = part[1:find_matching(part, 0)]
            params.extend(parse_parameter(p, kind) for p in split_top_level(inner))
        else:
            params.append(parse_parameter(part))
    return tuple(params)


def split_type_parameters(header):
    """'Future<T> load<T>' -> ('Future<T> load', '<T>'). A header without a trailing '<...>' gives (header, '')."""
    header = header.rstrip()
    if not header.endswith(">"):
        return header, ""
    depth = 0
    for i in range(len(header) - 1, -1, -1):
        if header[i] == ">":
            depth += 1
        elif header[i] == "<":
            depth -= 1
            if depth == 0:
                return header[:i].rstrip(), header[i:]
    raise DeclarationError(f"Unbalanced type parameters in '{header}'")


def parse_member(member, class_name):
    """Returns a MethodSignature for a method member, None for anything else."""
    member = _strip_leading_annotations(member)
    paren = member.find("(")
    if paren < 0:
        return None
    header = member[:paren]
    if "=" in header:
        # Field initializer or '=>' getter
        return None

    words = header.split()
    if not words or any(w in _NON_METHOD_KEYWORDS for w in words):
        return None
    concrete_modifier = False
    while words and words[0] in _CONCRETE_MODIFIERS | {"abstract"}:
        concrete_modifier = concrete_modifier or words[0] in _CONCRETE_MODIFIERS
        words.pop(0)
    header = " ".join(words)

    header, type_parameters = split_type_parameters(header)
    match = _MEMBER_NAME_RE.search(header)
    if not match:
        return None
    name = match.group(1)
    return_type = header[:match.start()].strip()
    if name == class_name or return_type == class_name + "." or header.startswith(class_name + "."):
        return None
    if not return_type:
        return_type = DYNAMIC_TYPE

    close = find_matching(member, paren)
    parameters = parse_parameters(member[paren + 1:close])
    rest = member[close + 1:].strip()
    if rest != ";" and not _BODY_START_RE.match(rest):
        # Function-typed field such as "final void Function() onDone;"
        return None
    is_abstract = rest == ";" and not concrete_modifier
    return MethodSignature(name=name, return_type=return_type, parameters=parameters, is_abstract=is_abstract,
                           type_parameters=type_parameters)


def parse_annotation_args(args_text):
    record = {}
    for match in _ANNOTATION_ARG_RE.finditer(args_text):
        key = match.group(1)
        if match.group(4) is not None:
            record[key] = None
        else:
            record[key] = match.group(2) if match.group(2) is not None else match.group(3)
    return record


def _skip_other_annotations(text, pos):
    while True:
        while pos < len(text) and text[pos].isspace():
            pos += 1
        match = _OTHER_ANNOTATION_RE.match(text, pos)
        if not match:
            return pos
        pos = match.end()
        if text[pos - 1] == "(":
            pos = find_matching(text, pos - 1) + 1


def _read_declaration(text, pos, annotation, source_file):
    class_match = _CLASS_HEADER_RE.match(text, pos)
    if class_match:
        keyword = class_match.group(2).split()[0]
        name = class_match.group(3)
        kind = "class" if keyword in ("class", "mixin") and "class" in class_match.group(2) else keyword
        if kind != "class":
            return ClassDeclaration(name=name, kind=kind, annotation=annotation, source_file=source_file)

        brace = text.find("{", class_match.end())
        if brace < 0:
            raise DeclarationError(f"Class {name} has no body", class_name=name)
        body = text[brace + 1:find_matching(text, brace)]
        methods = tuple(m for m in (parse_member(member, name) for member in split_members(body)) if m)
        return ClassDeclaration(
            name=name,
            kind=kind,
            methods=methods,
            annotation=annotation,
            is_abstract="abstract" in class_match.group(1).split(),
            source_file=source_file,
        )

    function_match = _FUNCTION_HEADER_RE.match(text, pos)
    if function_match:
        return ClassDeclaration(name=function_match.group(2), kind="function", annotation=annotation,
                                source_file=source_file)

    line_end = text.find("\n", pos)
    snippet = text[pos:line_end if line_end >= 0 else len(text)].strip()
    name = snippet.rstrip(";").split()[-1] if snippet else "<unknown>"
    return ClassDeclaration(name=name, kind="variable", annotation=annotation, source_file=source_file)


def scan_source(text, source_file=None):
    """Returns one ClassDeclaration per @JsonToModel annotation in the source, in source order."""
    text = strip_comments(text)
    declarations = []
    for match in _ANNOTATION_RE.finditer(text):
        open_paren = match.end() - 1
        close_paren = find_matching(text, open_paren)
        annotation = EnvelopeConfig.from_annotation(parse_annotation_args(text[open_paren + 1:close_paren]))
        pos = _skip_other_annotations(text, close_paren + 1)
        declaration = _read_declaration(text, pos, annotation, source_file)
        logger.debug(f"Found @{ANNOTATION_NAME} on {declaration.kind} {declaration.name}")
        declarations.append(declaration)

    logger.info(f"Found {len(declarations)} @{ANNOTATION_NAME} declaration(s) in {source_file or '<source>'}")
    return declarations


def scan_file(dart_filepath):
    try:
        text = Path(dart_filepath).read_text(encoding="utf-8")
    except OSError as e:
        raise DeclarationError(f"Failed to read Dart source {dart_filepath}: {e}", path=str(dart_filepath)) from e
    return scan_source(text, source_file=str(dart_filepath))
