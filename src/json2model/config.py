# config.py
import json
import logging
from dataclasses import dataclass, fields, replace
from typing import FrozenSet

from .errors import DeclarationError
from .type_utils import DART_PRIMITIVE_TYPES

logger = logging.getLogger(__name__)

# Defaults, overridable from the command line or an options JSON file
DEFAULT_IMPL_PREFIX = "_$"
DEFAULT_ITEM_FACTORY = "fromJson"
DIRECT_LIST_DATA_KEY = "data"
# Shared-part banner name, one per generator in a .g.dart file
GENERATOR_NAME = "Json2ModelGenerator"

# JSON option keys -> GeneratorOptions fields
_OPTION_KEYS = {
    "implPrefix": "impl_prefix",
    "primitiveHandling": "primitive_handling",
    "primitiveTypes": "primitive_names",
    "itemFactory": "item_factory",
    "listDataKey": "list_data_key",
}


@dataclass(frozen=True)
class GeneratorOptions:
    impl_prefix: str = DEFAULT_IMPL_PREFIX
    # When off, every list item goes through '<Item>.fromJson', primitives included
    primitive_handling: bool = True
    primitive_names: FrozenSet[str] = DART_PRIMITIVE_TYPES
    item_factory: str = DEFAULT_ITEM_FACTORY
    list_data_key: str = DIRECT_LIST_DATA_KEY

    @property
    def active_primitive_names(self):
        return self.primitive_names if self.primitive_handling else frozenset()

    def with_overrides(self, **overrides):
        """Returns a copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        changes = {k: v for k, v in overrides.items() if v is not None and k in known}
        if "primitive_names" in changes:
            changes["primitive_names"] = frozenset(changes["primitive_names"])
        return replace(self, **changes)


DEFAULT_OPTIONS = GeneratorOptions()


def load_options(options_json_path, base=DEFAULT_OPTIONS):
    """Loads GeneratorOptions overrides from a JSON object file, e.g. {"implPrefix": "_", "primitiveHandling": false}."""
    try:
        with open(options_json_path, 'r') as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DeclarationError(f"Failed to load options file {options_json_path}: {e}", path=str(options_json_path)) from e

    if not isinstance(raw, dict):
        raise DeclarationError(f"Options file {options_json_path} must contain a JSON object", path=str(options_json_path))

    overrides = {}
    for key, value in raw.items():
        field_name = _OPTION_KEYS.get(key)
        if field_name is None:
            logger.warning(f"Ignoring unknown option '{key}' in {options_json_path}")
            continue
        overrides[field_name] = value

    logger.info(f"Loaded {len(overrides)} option override(s) from {options_json_path}")
    return base.with_overrides(**overrides)
