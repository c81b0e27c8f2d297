"""Unit tests for the class-level generation pipeline."""

import logging

import pytest

from json2model.config import GeneratorOptions
from json2model.dart_scanner import scan_source
from json2model.errors import InvalidConfiguration, UnsupportedTarget
from json2model.generator import GENERATED_HEADER, Json2ModelGenerator, generate_for_class
from json2model.models import (
    ClassDeclaration,
    DirectList,
    DirectModel,
    EnvelopeConfig,
    MethodSignature,
    Parameter,
    WrappedList,
    WrappedModel,
)


JSON = Parameter(type_expr="Map<String, dynamic>", name="json")


class TestGenerateForClass:
    def test_class_shell(self, task_api):
        code = generate_for_class(task_api)
        assert code.startswith("class _$TaskApi implements TaskApi {\n")
        assert code.endswith("}\n")

    def test_one_override_per_abstract_method(self, task_api):
        code = generate_for_class(task_api)
        assert code.count("@override") == 4

    def test_concrete_method_is_skipped(self, task_api):
        code = generate_for_class(task_api)
        assert "describe" not in code

    def test_methods_in_declaration_order(self, task_api):
        code = generate_for_class(task_api)
        positions = [code.index(f" {name}(") for name in ("getTasks", "getTask", "listTasks", "parseTask")]
        assert positions == sorted(positions)

    def test_future_signature_kept(self, task_api):
        code = generate_for_class(task_api)
        assert "  Future<BaseResult<Task>> getTask(Map<String, dynamic> json) {\n" in code
        assert "return BaseResult<Task>.fromJson(json, (data) => Task.fromJson(data as Map<String, dynamic>));" in code

    def test_end_to_end_wrapped_list(self, base_result_config):
        declaration = ClassDeclaration(
            name="TaskApi",
            annotation=base_result_config,
            methods=(MethodSignature("getTasks", "BaseResult<List<Task>>", (JSON,)),),
        )
        code = generate_for_class(declaration)
        assert code == (
            "class _$TaskApi implements TaskApi {\n"
            "  @override\n"
            "  BaseResult<List<Task>> getTasks(Map<String, dynamic> json) {\n"
            "    return BaseResult<List<Task>>.fromJson(json, (data) => "
            "(data as List).map((e) => Task.fromJson(e as Map<String, dynamic>)).toList());\n"
            "  }\n"
            "}\n"
        )

    def test_custom_impl_prefix(self, task_api):
        code = generate_for_class(task_api, GeneratorOptions(impl_prefix="Generated"))
        assert code.startswith("class GeneratedTaskApi implements TaskApi {")

    def test_non_class_target(self, base_result_config):
        declaration = ClassDeclaration(name="parseTask", kind="function", annotation=base_result_config)
        with pytest.raises(UnsupportedTarget):
            generate_for_class(declaration)

    def test_empty_envelope_factory_raises(self):
        declaration = ClassDeclaration(
            name="TaskApi",
            annotation=EnvelopeConfig(wrapper_type="BaseResult", wrapper_factory_name=""),
            methods=(MethodSignature("getTask", "BaseResult<Task>", (JSON,)),),
        )
        with pytest.raises(InvalidConfiguration):
            generate_for_class(declaration)

    def test_idempotent(self, task_api):
        assert generate_for_class(task_api) == generate_for_class(task_api)


class TestGenerateMethods:
    def test_shapes(self, task_api):
        shapes = [m.shape for m in Json2ModelGenerator().generate_methods(task_api)]
        assert shapes == [
            WrappedList("Task"),
            WrappedModel("Task"),
            DirectList("Task"),
            DirectModel("Task"),
        ]

    def test_unannotated_declaration_uses_no_envelope(self):
        declaration = ClassDeclaration(
            name="Plain",
            methods=(MethodSignature("load", "BaseResult<Task>", (JSON,)),),
        )
        methods = Json2ModelGenerator().generate_methods(declaration)
        assert methods[0].shape == DirectModel("BaseResult<Task>")


class TestGenerateForAnnotated:
    def test_unannotated_produces_nothing(self):
        declaration = ClassDeclaration(name="Plain", methods=(MethodSignature("load", "Task", (JSON,)),))
        assert Json2ModelGenerator().generate_for_annotated(declaration) == ""

    def test_non_class_is_skipped_with_warning(self, caplog, base_result_config):
        declaration = ClassDeclaration(name="parseTask", kind="function", annotation=base_result_config)
        with caplog.at_level(logging.WARNING, logger="json2model.generator"):
            assert Json2ModelGenerator().generate_for_annotated(declaration) == ""
        assert "parseTask" in caplog.text


class TestGenerateLibrary:
    def test_part_file_layout(self, task_api):
        code = Json2ModelGenerator().generate_library([task_api], part_of="task_api.dart")
        assert code.startswith(GENERATED_HEADER + "\n\n")
        assert "part of 'task_api.dart';\n" in code
        assert "// Json2ModelGenerator\n" in code
        assert code.endswith(generate_for_class(task_api))

    def test_without_part_directive(self, task_api):
        code = Json2ModelGenerator().generate_library([task_api])
        assert "part of" not in code

    def test_nothing_to_generate(self, base_result_config):
        skipped = ClassDeclaration(name="parseTask", kind="function", annotation=base_result_config)
        plain = ClassDeclaration(name="Plain")
        assert Json2ModelGenerator().generate_library([skipped, plain]) == ""

    def test_multiple_classes_in_order(self, task_api, base_result_config):
        other = ClassDeclaration(
            name="UserApi",
            annotation=base_result_config,
            methods=(MethodSignature("me", "BaseResult<User>", (JSON,)),),
        )
        code = Json2ModelGenerator().generate_library([task_api, other])
        assert code.index("class _$TaskApi") < code.index("class _$UserApi")


class TestScannedSignatures:
    SOURCE = """
    @JsonToModel(wrapperType: 'BaseResult')
    abstract class NullableApi {
      Task? findTask(Map<String, dynamic> json);
      Future<BaseResult<Task>?> maybeWrapped(Map<String, dynamic> json);
      List<Task>? maybeList(Map<String, dynamic> json);
      T decode<T>(Map<String, dynamic> json);
    }
    """

    def generate(self):
        [declaration] = scan_source(self.SOURCE)
        return generate_for_class(declaration)

    def test_nullable_model_uses_non_nullable_receiver(self):
        code = self.generate()
        assert "  Task? findTask(Map<String, dynamic> json) {\n    return Task.fromJson(json);\n" in code

    def test_nullable_envelope_is_still_wrapped(self):
        code = self.generate()
        assert "  Future<BaseResult<Task>?> maybeWrapped(Map<String, dynamic> json) {\n" in code
        assert ("return BaseResult<Task>.fromJson(json, (data) => "
                "Task.fromJson(data as Map<String, dynamic>));") in code

    def test_nullable_list(self):
        code = self.generate()
        assert ("return (json['data'] as List).map((e) => "
                "Task.fromJson(e as Map<String, dynamic>)).toList();") in code

    def test_no_nullable_receivers(self):
        code = self.generate()
        assert "?.fromJson" not in code
        assert "?>.fromJson" not in code

    def test_method_type_parameters_kept(self):
        code = self.generate()
        assert "  T decode<T>(Map<String, dynamic> json) {\n    return T.fromJson(json);\n" in code
