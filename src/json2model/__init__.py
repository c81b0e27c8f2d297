from .classifier import classify
from .code_gen.emitter import emit, render_method
from .config import DEFAULT_OPTIONS, GeneratorOptions
from .errors import (DeclarationError, GenerationError, InvalidConfiguration, InvalidSignature,
                     UnsupportedTarget)
from .generator import Json2ModelGenerator, generate_for_class
from .models import (ClassDeclaration, DirectList, DirectModel, EnvelopeConfig, GeneratedMethod,
                     MethodSignature, Parameter, TypeShape, WrappedList, WrappedModel)

__version__ = "0.1.0"
