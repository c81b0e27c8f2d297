# classifier.py
import logging

from .models import DirectList, DirectModel, EnvelopeConfig, TypeShape, WrappedList, WrappedModel
from .type_utils import LIST_TYPE, list_item_identifier, non_nullable, split_generic, strip_async_wrapper

logger = logging.getLogger(__name__)


def classify(return_type: str, config: EnvelopeConfig) -> TypeShape:
    """
    Picks the deserialization shape for a declared return type.

    Rules are checked in a fixed order, earlier ones shadow later ones:
      1. WrappedList   - Wrapper<List<Item>>
      2. WrappedModel  - Wrapper<Anything>
      3. DirectList    - List<Item>, or List<List<Item>> read with the inner item
      4. DirectModel   - everything else
    A 'Future<...>' around the type is ignored, and so is every '?': the shape and the
    type names it carries are always non-nullable. Never raises.
    """
    effective_type = strip_async_wrapper(non_nullable(return_type))

    outer_type, inner_type = split_generic(effective_type)
    list_item_type = list_item_identifier(inner_type) if inner_type is not None else None

    logger.debug(
        f"Return type analysis: return_type={return_type}, effective_type={effective_type}, "
        f"outer_type={outer_type}, inner_type={inner_type}, list_item_type={list_item_type}, "
        f"wrapper_type={config.wrapper_type}")

    wrapper_matches = config.envelope_enabled and outer_type == config.wrapper_type

    if wrapper_matches and list_item_type is not None:
        return WrappedList(list_item_type=list_item_type)

    if wrapper_matches and inner_type is not None:
        # Compound inner types (e.g. 'Map<String, Task>') are passed through as written
        return WrappedModel(inner_type=inner_type)

    if effective_type.startswith(f"{LIST_TYPE}<"):
        # 'List<List<int>>' takes its item from the inner capture, 'List<Task>' from the whole type
        direct_item_type = list_item_type or list_item_identifier(effective_type)
        if direct_item_type is not None:
            return DirectList(list_item_type=direct_item_type)

    return DirectModel(type_name=effective_type)
