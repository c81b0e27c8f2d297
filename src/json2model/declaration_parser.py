# declaration_parser.py
import json
import logging

from .errors import DeclarationError
from .models import PARAMETER_KINDS, POSITIONAL, ClassDeclaration, EnvelopeConfig, MethodSignature, Parameter

logger = logging.getLogger(__name__)

DEFAULT_KIND = "class"


def _parse_parameter(param_data, method_name):
    if isinstance(param_data, str):
        # Shorthand: "Map<String, dynamic> json" - the name is the last word
        type_expr, _, name = param_data.strip().rpartition(" ")
        if not type_expr or not name:
            raise DeclarationError(f"Parameter '{param_data}' of {method_name} needs a type and a name")
        return Parameter(type_expr=type_expr.strip(), name=name)

    try:
        type_expr, name = param_data['type'], param_data['name']
    except (KeyError, TypeError) as e:
        raise DeclarationError(f"Parameter of {method_name} needs 'type' and 'name': {param_data!r}") from e

    kind = param_data.get('kind', POSITIONAL)
    if kind not in PARAMETER_KINDS:
        raise DeclarationError(f"Parameter '{name}' of {method_name} has unknown kind '{kind}'")
    return Parameter(
        type_expr=type_expr,
        name=name,
        kind=kind,
        required=bool(param_data.get('required', False)),
        default=param_data.get('default'),
    )


def _parse_method(method_data, class_name):
    if not isinstance(method_data, dict):
        raise DeclarationError(f"Method entry in {class_name} must be an object", class_name=class_name)
    name = method_data.get('name')
    return_type = method_data.get('returnType')
    if not name or not return_type:
        raise DeclarationError(f"Method in {class_name} needs 'name' and 'returnType': {method_data!r}",
                               class_name=class_name)

    parameters = tuple(_parse_parameter(p, name) for p in method_data.get('parameters', []))
    return MethodSignature(
        name=name,
        return_type=return_type,
        parameters=parameters,
        is_abstract=bool(method_data.get('isAbstract', True)),
        type_parameters=method_data.get('typeParameters') or "",
    )


def _parse_class(class_data, source_file=None):
    if not isinstance(class_data, dict):
        raise DeclarationError(f"Class entry must be an object, got {type(class_data).__name__}")
    name = class_data.get('name')
    if not name:
        raise DeclarationError(f"Class entry without a 'name': {class_data!r}")

    methods = tuple(_parse_method(m, name) for m in class_data.get('methods', []))
    names = [m.name for m in methods]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise DeclarationError(f"Duplicate method names in {name}: {', '.join(duplicates)}", class_name=name)

    annotation_data = class_data.get('annotation')
    annotation = None
    if annotation_data is not None:
        if not isinstance(annotation_data, dict):
            raise DeclarationError(f"Annotation of {name} must be an object", class_name=name)
        annotation = EnvelopeConfig.from_annotation(annotation_data)

    return ClassDeclaration(
        name=name,
        kind=class_data.get('kind', DEFAULT_KIND),
        methods=methods,
        annotation=annotation,
        is_abstract=bool(class_data.get('isAbstract', True)),
        source_file=source_file,
    )


def load_declarations(data, source_file=None):
    """Builds ClassDeclarations from decoded JSON: {"classes": [...]} or a bare list of class entries."""
    if isinstance(data, dict):
        classes = data.get('classes')
    else:
        classes = data
    if not isinstance(classes, list):
        raise DeclarationError("Declaration data must be a list of classes or an object with a 'classes' list")

    declarations = [_parse_class(c, source_file) for c in classes]
    annotated = sum(1 for d in declarations if d.annotation is not None)
    logger.info(f"Loaded {len(declarations)} declarations ({annotated} annotated).")
    return declarations


def parse_declarations(declarations_filepath):
    """Loads and parses a JSON declaration file."""
    try:
        with open(declarations_filepath, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DeclarationError(f"Failed to load or parse declaration file {declarations_filepath}: {e}",
                               path=str(declarations_filepath)) from e
    return load_declarations(data, source_file=str(declarations_filepath))
