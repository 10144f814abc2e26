"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest

from schema_typegen.cli import create_parser, main

PERSON = {
    "title": "Person",
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "address": {"$ref": "address.json"},
    },
    "required": ["name"],
}

ADDRESS = {"type": "object", "properties": {"city": {"type": "string"}}}


@pytest.fixture
def schema_file(tmp_path):
    (tmp_path / "address.json").write_text(json.dumps(ADDRESS), encoding="utf-8")
    path = tmp_path / "person.json"
    path.write_text(json.dumps(PERSON), encoding="utf-8")
    return path


def test_parser_defaults() -> None:
    args = create_parser().parse_args(["schema.json"])

    assert args.schema == "schema.json"
    assert args.language == "python"
    assert args.style is None
    assert args.verbose == 0


def test_generates_pydantic_models_to_file(schema_file, tmp_path) -> None:
    output = tmp_path / "models.py"

    assert main([str(schema_file), "-o", str(output)]) == 0

    code = output.read_text(encoding="utf-8")
    assert "class Person(BaseModel):" in code
    assert "class Address(BaseModel):" in code
    assert "    address: Address | None = None" in code


def test_style_and_naming_options(schema_file, tmp_path) -> None:
    output = tmp_path / "models.py"
    config = tmp_path / "typegen.json"
    config.write_text(json.dumps({"class_name_suffix": "Model"}), encoding="utf-8")

    exit_code = main(
        [
            str(schema_file),
            "--style", "dataclasses",
            "--config", str(config),
            "--root-name", "customer",
            "--no-comments",
            "--builders",
            "-o", str(output),
        ]
    )

    assert exit_code == 0
    code = output.read_text(encoding="utf-8")
    assert "@dataclass(kw_only=True)\nclass CustomerModel:" in code
    assert "class CustomerModelBuilder:" in code
    assert "class AddressModel:" in code
    assert not code.startswith('"""')


def test_summary_prints_to_console(schema_file, tmp_path, capsys) -> None:
    assert main([str(schema_file), "--summary", "-o", str(tmp_path / "out.py")]) == 0

    out = capsys.readouterr().out
    assert "Generated Types" in out
    assert "models.Address" in out


def test_list_languages(capsys) -> None:
    assert main(["--list-languages"]) == 0
    assert "python" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["does-not-exist.json"],
        ["{schema}", "--style", "xml"],
        ["{schema}", "--language", "cobol"],
        ["{schema}", "--config", "{missing_config}"],
    ],
)
def test_errors_exit_with_status_one(schema_file, tmp_path, argv) -> None:
    argv = [
        a.format(schema=schema_file, missing_config=tmp_path / "nope.json") for a in argv
    ]
    assert main(argv) == 1


def test_unresolvable_reference_fails(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text(
        json.dumps({"type": "object", "properties": {"x": {"$ref": "gone.json"}}}),
        encoding="utf-8",
    )

    assert main([str(path), "-o", str(tmp_path / "out.py")]) == 1
    assert not (tmp_path / "out.py").exists()


def test_fail_on_unsupported_flag(tmp_path) -> None:
    path = tmp_path / "odd.json"
    path.write_text(
        json.dumps({"type": "object", "properties": {"x": {"type": "weird"}}}),
        encoding="utf-8",
    )

    assert main([str(path), "-o", str(tmp_path / "lenient.py")]) == 0
    assert main([str(path), "--fail-on-unsupported", "-o", str(tmp_path / "strict.py")]) == 1
