# generator.py
import logging
from typing import Iterable, List

from .classifier import classify
from .code_gen.emitter import render_method
from .config import DEFAULT_OPTIONS, GENERATOR_NAME
from .errors import UnsupportedTarget
from .models import ClassDeclaration, EnvelopeConfig, GeneratedMethod

logger = logging.getLogger(__name__)

GENERATED_HEADER = "// GENERATED CODE - DO NOT MODIFY BY HAND"
BANNER_RULE = "// " + "*" * 74


class Json2ModelGenerator:
    """
    Generates '_$<Name> implements <Name>' for classes carrying a @JsonToModel annotation.
    Holds only options, so one instance can be reused for any number of classes.
    """

    def __init__(self, options=DEFAULT_OPTIONS):
        self.options = options

    def implementation_name(self, class_name):
        return f"{self.options.impl_prefix}{class_name}"

    def generate_methods(self, declaration: ClassDeclaration) -> List[GeneratedMethod]:
        """Classifies and emits every abstract method, in declaration order."""
        config = declaration.annotation or EnvelopeConfig()
        generated = []
        for method in declaration.methods:
            if not method.is_abstract:
                logger.debug(f"Skipping non-abstract method: {method.name}")
                continue

            logger.info(f"Processing method: {method.name} with return type: {method.return_type}")
            shape = classify(method.return_type, config)
            generated.append(render_method(method, shape, config, self.options))
        return generated

    def generate_for_class(self, declaration: ClassDeclaration) -> str:
        """
        Returns the implementation class source, whitespace-naive (run it through a formatter).
        Raises UnsupportedTarget for non-class declarations, InvalidConfiguration and
        InvalidSignature from the emitter.
        """
        if not declaration.is_class:
            raise UnsupportedTarget(
                f"Element {declaration.name} is a {declaration.kind}, not a class",
                name=declaration.name, kind=declaration.kind)

        impl_name = self.implementation_name(declaration.name)
        logger.info(f"Generating implementation for class: {declaration.name}")
        config = declaration.annotation or EnvelopeConfig()
        logger.info(f"Annotation config: wrapperType={config.wrapper_type}, "
                    f"wrapperFromJson={config.wrapper_factory_name}")

        code = f"class {impl_name} implements {declaration.name} {{\n"
        for method in self.generate_methods(declaration):
            code += method.source
        code += "}\n"

        logger.info(f"Completed generation for {declaration.name}")
        return code

    def generate_for_annotated(self, declaration: ClassDeclaration) -> str:
        """
        Entry point for the build driver. Declarations without the annotation produce nothing;
        annotated non-class targets are skipped with a warning instead of aborting the run.
        """
        if declaration.annotation is None:
            return ""
        logger.info(f"Processing element: {declaration.name}")
        try:
            return self.generate_for_class(declaration)
        except UnsupportedTarget as e:
            logger.warning(f"{e.message}, skipping.")
            return ""

    def generate_library(self, declarations: Iterable[ClassDeclaration], part_of=None) -> str:
        """
        Builds the full part-file text for one source library. Returns "" when no
        declaration produced code, so callers can skip writing the file.
        """
        outputs = []
        for declaration in declarations:
            generated = self.generate_for_annotated(declaration)
            if generated:
                outputs.append(generated)

        if not outputs:
            return ""

        code = f"{GENERATED_HEADER}\n\n"
        if part_of:
            code += f"part of '{part_of}';\n\n"
        code += f"{BANNER_RULE}\n"
        code += f"// {GENERATOR_NAME}\n"
        code += f"{BANNER_RULE}\n\n"
        code += "\n".join(outputs)
        return code


def generate_for_class(declaration: ClassDeclaration, options=DEFAULT_OPTIONS) -> str:
    return Json2ModelGenerator(options).generate_for_class(declaration)
