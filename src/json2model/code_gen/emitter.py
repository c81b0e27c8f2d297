# code_gen/emitter.py
import logging

from ..config import DEFAULT_OPTIONS
from ..errors import InvalidConfiguration, InvalidSignature
from ..models import (DirectList, DirectModel, EnvelopeConfig, GeneratedMethod, MethodSignature,
                      TypeShape, WrappedList, WrappedModel)
from ..type_utils import DART_PRIMITIVE_TYPES, LIST_TYPE, NUMERIC_COERCIONS, is_primitive

logger = logging.getLogger(__name__)

# Name of the parameter that carries the decoded JSON value, when the signature has one
PREFERRED_INPUT_PARAM = "json"
JSON_MAP_TYPE = "Map<String, dynamic>"
# Parameter name of the element decoder lambda handed to the envelope factory
DECODER_ARG = "data"


def input_param_name(signature: MethodSignature):
    """The parameter holding the raw JSON value: 'json' if declared, otherwise the first parameter."""
    if not signature.parameters:
        raise InvalidSignature(
            f"Method '{signature.name}' declares no parameter to decode from",
            method=signature.name)
    for param in signature.parameters:
        if param.name == PREFERRED_INPUT_PARAM:
            return param.name
    return signature.parameters[0].name


def list_items_expr(raw_list_expr, item_type, primitive_names, item_factory=DEFAULT_OPTIONS.item_factory):
    """
    Dart expression building a List<item_type> from a raw JSON list expression.
    Primitives are cast (or coerced) in bulk, everything else goes through the item factory.
    """
    source = f"({raw_list_expr} as {LIST_TYPE})"
    if is_primitive(item_type, primitive_names):
        coercion = NUMERIC_COERCIONS.get(item_type)
        if coercion:
            return f"{source}.map((e) => {coercion}).toList()"
        return f"{source}.cast<{item_type}>().toList()"
    return f"{source}.map((e) => {item_type}.{item_factory}(e as {JSON_MAP_TYPE})).toList()"


def _check_envelope_factory(signature, config):
    if not config.wrapper_factory_name:
        raise InvalidConfiguration(
            f"Method '{signature.name}' returns envelope '{config.wrapper_type}' but wrapperFromJson is empty",
            method=signature.name, wrapper_type=config.wrapper_type)


def emit(signature: MethodSignature, shape: TypeShape, primitive_names=DART_PRIMITIVE_TYPES,
         config: EnvelopeConfig = EnvelopeConfig(), options=DEFAULT_OPTIONS) -> str:
    """Renders the body of one generated method: a single return statement."""
    param = input_param_name(signature)
    item_factory = options.item_factory

    if isinstance(shape, TypeShape) and shape.wrapped:
        _check_envelope_factory(signature, config)

    if isinstance(shape, WrappedList):
        items = list_items_expr(DECODER_ARG, shape.list_item_type, primitive_names, item_factory)
        logger.info(f"Generating code for wrapped List: {config.wrapper_type}<List<{shape.list_item_type}>>")
        return (f"return {config.wrapper_type}<{LIST_TYPE}<{shape.list_item_type}>>.{config.wrapper_factory_name}"
                f"({param}, ({DECODER_ARG}) => {items});")

    if isinstance(shape, WrappedModel):
        logger.info(f"Generating code for wrapped model: {config.wrapper_type}<{shape.inner_type}>")
        return (f"return {config.wrapper_type}<{shape.inner_type}>.{config.wrapper_factory_name}"
                f"({param}, ({DECODER_ARG}) => {shape.inner_type}.{item_factory}({DECODER_ARG} as {JSON_MAP_TYPE}));")

    if isinstance(shape, DirectList):
        logger.info(f"Generating code for List: List<{shape.list_item_type}>")
        items = list_items_expr(f"{param}['{options.list_data_key}']", shape.list_item_type,
                                primitive_names, item_factory)
        return f"return {items};"

    if isinstance(shape, DirectModel):
        logger.info(f"Generating code for direct model: {shape.type_name}")
        return f"return {shape.type_name}.{item_factory}({param});"

    raise TypeError(f"Unknown type shape: {shape!r}")


def render_method(signature: MethodSignature, shape: TypeShape, config: EnvelopeConfig,
                  options=DEFAULT_OPTIONS) -> GeneratedMethod:
    body = emit(signature, shape, options.active_primitive_names, config, options)
    return GeneratedMethod(signature=signature, shape=shape, body=body)
