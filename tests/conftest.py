"""Shared fixtures for the json2model test suite."""

from __future__ import annotations

import pytest

from json2model.models import ClassDeclaration, EnvelopeConfig, MethodSignature, Parameter


JSON_PARAM = Parameter(type_expr="Map<String, dynamic>", name="json")


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def base_result_config() -> EnvelopeConfig:
    return EnvelopeConfig(wrapper_type="BaseResult", wrapper_factory_name="fromJson")


@pytest.fixture
def no_wrapper_config() -> EnvelopeConfig:
    return EnvelopeConfig(wrapper_type="", wrapper_factory_name="fromJson")


def make_method(name: str, return_type: str, is_abstract: bool = True) -> MethodSignature:
    return MethodSignature(name=name, return_type=return_type, parameters=(JSON_PARAM,), is_abstract=is_abstract)


@pytest.fixture
def task_api(base_result_config: EnvelopeConfig) -> ClassDeclaration:
    """One method per shape, plus a concrete helper that must never be generated."""
    return ClassDeclaration(
        name="TaskApi",
        annotation=base_result_config,
        methods=(
            make_method("getTasks", "BaseResult<List<Task>>"),
            make_method("getTask", "Future<BaseResult<Task>>"),
            make_method("listTasks", "List<Task>"),
            make_method("parseTask", "Task"),
            make_method("describe", "String", is_abstract=False),
        ),
    )

