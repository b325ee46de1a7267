"""Presenter output formats."""

import json

import pytest
import yaml

from vers.errors import EntryNotFoundError, UnsupportedFormatError
from vers.models import Document, Version
from vers.presenter import OUTPUT_FORMATS, OutputFormat, render_all, render_entry


@pytest.fixture
def document():
    return Document(versions={
        "app": Version(prefix="v", major=1, minor=2, patch=3),
        "my-lib": Version(suffix="-rc1", major=0, minor=4, patch=0),
    })


def test_str(document):
    assert render_entry(document, "my-lib", "str") == "0.4.0-rc1"


def test_shell_uppercases_and_replaces_hyphens_in_name(document):
    assert render_entry(document, "my-lib", "shell") == "export MY_LIB_VERS=0.4.0-rc1"


def test_json_single_entry(document):
    out = render_entry(document, "app", OutputFormat.JSON)
    assert out.startswith('{\n   "app"')
    assert json.loads(out) == {"app": document.versions["app"].to_dict()}


@pytest.mark.parametrize("fmt", ["yaml", "yml"])
def test_yaml_single_entry(document, fmt):
    out = render_entry(document, "app", fmt)
    assert yaml.safe_load(out) == {"app": document.versions["app"].to_dict()}


def test_missing_entry(document):
    with pytest.raises(EntryNotFoundError):
        render_entry(document, "ghost", "str")


@pytest.mark.parametrize("fmt", ["xml", "", "STR"])
def test_unknown_format(document, fmt):
    with pytest.raises(UnsupportedFormatError):
        render_entry(document, "app", fmt)
    with pytest.raises(UnsupportedFormatError):
        render_all(document, fmt)


def test_render_all_str_one_line_per_entry(document):
    assert sorted(render_all(document, "str").splitlines()) == ["0.4.0-rc1", "v1.2.3"]


def test_render_all_shell(document):
    lines = render_all(document, "shell").splitlines()
    assert "export APP_VERS=v1.2.3" in lines
    assert "export MY_LIB_VERS=0.4.0-rc1" in lines


def test_render_all_json_is_whole_mapping(document):
    data = json.loads(render_all(document, "json"))
    assert set(data) == {"app", "my-lib"}
    assert data["my-lib"]["Suffix"] == "-rc1"


def test_render_all_yaml_is_whole_mapping(document):
    data = yaml.safe_load(render_all(document, "yaml"))
    assert data["app"]["Major"] == 1


def test_render_all_empty_document():
    assert render_all(Document(), "str") == ""
    assert json.loads(render_all(Document(), "json")) == {}


def test_output_format_choices_follow_enum():
    assert set(OUTPUT_FORMATS) == {f.value for f in OutputFormat} | {"yml"}
    assert {OutputFormat.parse(name) for name in OUTPUT_FORMATS} == set(OutputFormat)
