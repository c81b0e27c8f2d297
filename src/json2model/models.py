# models.py
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

DEFAULT_WRAPPER_FACTORY = "fromJson"


POSITIONAL = "positional"
OPTIONAL_POSITIONAL = "optional"
NAMED = "named"
PARAMETER_KINDS = (POSITIONAL, OPTIONAL_POSITIONAL, NAMED)


@dataclass(frozen=True)
class Parameter:
    type_expr: str
    name: str
    # Dart parameter group: plain, '[optional]' or '{named}'
    kind: str = POSITIONAL
    required: bool = False
    default: Optional[str] = None

    def render(self):
        text = f"{self.type_expr} {self.name}"
        if self.required and self.kind == NAMED:
            text = f"required {text}"
        if self.default is not None:
            text += f" = {self.default}"
        return text


def render_parameters(parameters):
    """Renders a parameter list with its '[...]' / '{...}' groups, e.g. 'int a, {required String b}'."""
    positional = [p.render() for p in parameters if p.kind == POSITIONAL]
    optional = [p.render() for p in parameters if p.kind == OPTIONAL_POSITIONAL]
    named = [p.render() for p in parameters if p.kind == NAMED]
    parts = list(positional)
    # Dart allows one trailing group, never both
    if optional:
        parts.append(f"[{', '.join(optional)}]")
    if named:
        parts.append(f"{{{', '.join(named)}}}")
    return ", ".join(parts)


@dataclass(frozen=True)
class MethodSignature:
    name: str
    return_type: str
    parameters: Tuple[Parameter, ...] = ()
    is_abstract: bool = True
    # Generic parameter list as written, e.g. '<T extends Model>'
    type_parameters: str = ""

    def render(self):
        """Declaration text as written, e.g. 'Future<Task> getTask(Map<String, dynamic> json)'."""
        return f"{self.return_type} {self.name}{self.type_parameters}({render_parameters(self.parameters)})"


@dataclass(frozen=True)
class EnvelopeConfig:
    wrapper_type: Optional[str] = None
    wrapper_factory_name: str = DEFAULT_WRAPPER_FACTORY

    @property
    def envelope_enabled(self):
        return bool(self.wrapper_type)

    @classmethod
    def from_annotation(cls, record: Dict[str, Any]) -> "EnvelopeConfig":
        """Builds the config from a '@JsonToModel(...)' record with keys 'wrapperType' and 'wrapperFromJson'."""
        wrapper_type = record.get("wrapperType") or None
        factory = record.get("wrapperFromJson")
        if factory is None:
            factory = DEFAULT_WRAPPER_FACTORY
        return cls(wrapper_type=wrapper_type, wrapper_factory_name=factory)


# --- Type shapes ---

@dataclass(frozen=True)
class TypeShape:
    """Base for the four deserialization shapes a return type can take."""

    @property
    def wrapped(self):
        return False


@dataclass(frozen=True)
class WrappedList(TypeShape):
    list_item_type: str

    @property
    def wrapped(self):
        return True


@dataclass(frozen=True)
class WrappedModel(TypeShape):
    inner_type: str

    @property
    def wrapped(self):
        return True


@dataclass(frozen=True)
class DirectList(TypeShape):
    list_item_type: str


@dataclass(frozen=True)
class DirectModel(TypeShape):
    type_name: str


@dataclass(frozen=True)
class GeneratedMethod:
    signature: MethodSignature
    shape: TypeShape
    body: str

    @property
    def source(self):
        code = "  @override\n"
        code += f"  {self.signature.render()} {{\n"
        code += f"    {self.body}\n"
        code += "  }\n"
        return code


@dataclass(frozen=True)
class ClassDeclaration:
    """One declaration handed over by a loader; annotation is None when the marker is absent."""
    name: str
    kind: str = "class"
    methods: Tuple[MethodSignature, ...] = ()
    annotation: Optional[EnvelopeConfig] = None
    is_abstract: bool = True
    source_file: Optional[str] = field(default=None, compare=False)

    @property
    def is_class(self):
        return self.kind == "class"
