"""Unit tests for the command line entry point."""

import json

import pytest

from json2model.cli import main, output_path_for


DART_SOURCE = """
@JsonToModel(wrapperType: 'BaseResult', wrapperFromJson: 'fromJson')
abstract class TaskApi {
  Future<BaseResult<List<Task>>> getTasks(Map<String, dynamic> json);
  List<int> ids(Map<String, dynamic> json);
  String describe() => 'TaskApi';
}
"""


@pytest.fixture
def dart_file(tmp_path):
    path = tmp_path / "task_api.dart"
    path.write_text(DART_SOURCE)
    return path


@pytest.fixture
def json_file(tmp_path):
    path = tmp_path / "task_api.json"
    path.write_text(json.dumps({"classes": [{
        "name": "TaskApi",
        "annotation": {"wrapperType": "BaseResult"},
        "methods": [{"name": "ids", "returnType": "List<int>", "parameters": ["Map<String, dynamic> json"]}],
    }]}))
    return path


class TestOutputPath:
    def test_next_to_input(self, tmp_path):
        assert output_path_for(tmp_path / "lib" / "api.dart", None) == tmp_path / "lib" / "api.g.dart"

    def test_output_dir(self, tmp_path):
        assert output_path_for(tmp_path / "api.json", tmp_path / "out") == tmp_path / "out" / "api.g.dart"


class TestMain:
    def test_writes_part_file(self, dart_file):
        assert main([str(dart_file)]) == 0
        code = (dart_file.parent / "task_api.g.dart").read_text()
        assert "part of 'task_api.dart';" in code
        assert "class _$TaskApi implements TaskApi {" in code
        assert "return (json['data'] as List).cast<int>().toList();" in code
        assert "describe" not in code

    def test_output_dir_created(self, dart_file, tmp_path):
        out = tmp_path / "generated"
        assert main([str(dart_file), "-o", str(out)]) == 0
        assert (out / "task_api.g.dart").exists()

    def test_stdout(self, dart_file, capsys):
        assert main([str(dart_file), "--stdout"]) == 0
        assert "class _$TaskApi implements TaskApi {" in capsys.readouterr().out
        assert not (dart_file.parent / "task_api.g.dart").exists()

    def test_json_input_without_primitives(self, json_file, capsys):
        assert main([str(json_file), "--stdout", "--no-primitives"]) == 0
        out = capsys.readouterr().out
        assert "int.fromJson(e as Map<String, dynamic>)" in out
        assert "part of" not in out

    def test_impl_prefix(self, dart_file, capsys):
        assert main([str(dart_file), "--stdout", "--impl-prefix", "Generated"]) == 0
        assert "class GeneratedTaskApi implements TaskApi {" in capsys.readouterr().out

    def test_options_json(self, dart_file, tmp_path, capsys):
        options = tmp_path / "options.json"
        options.write_text(json.dumps({"implPrefix": "_Gen", "listDataKey": "items"}))
        assert main([str(dart_file), "--stdout", "--options-json", str(options)]) == 0
        out = capsys.readouterr().out
        assert "class _GenTaskApi implements TaskApi {" in out
        assert "json['items']" in out

    def test_missing_input(self, tmp_path):
        assert main([str(tmp_path / "missing.dart")]) == 1

    def test_invalid_configuration(self, tmp_path):
        path = tmp_path / "api.json"
        path.write_text(json.dumps([{
            "name": "Api",
            "annotation": {"wrapperType": "BaseResult", "wrapperFromJson": ""},
            "methods": [{"name": "get", "returnType": "BaseResult<Task>", "parameters": ["Map<String, dynamic> json"]}],
        }]))
        assert main([str(path)]) == 1
        assert not (tmp_path / "api.g.dart").exists()

    def test_nothing_annotated(self, tmp_path):
        path = tmp_path / "plain.dart"
        path.write_text("class Plain {}\n")
        assert main([str(path)]) == 0
        assert not (tmp_path / "plain.g.dart").exists()

    def test_format_flag(self, dart_file, monkeypatch, capsys):
        monkeypatch.setattr("json2model.cli.format_source", lambda code: "FORMATTED\n")
        assert main([str(dart_file), "--stdout", "--format"]) == 0
        assert capsys.readouterr().out == "FORMATTED\n"
