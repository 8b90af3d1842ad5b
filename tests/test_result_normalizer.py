import json

import pytest

from docparse.core.managers.result_normalizer import ResultNormalizer


@pytest.fixture
def normalizer():
    return ResultNormalizer()


def test_expected_shape_passes_through(normalizer):
    markdown = "# Jane Doe\n\n- Python\n- SQL"
    assert normalizer.normalize(markdown) == markdown


def test_string_encoded_json_is_unwrapped(normalizer):
    wrapped = json.dumps({"markdown": "Hello", "job_metadata": {"pages": 1}})
    assert normalizer.normalize(wrapped) == "Hello"


def test_mapping_with_result_field_is_unwrapped(normalizer):
    assert normalizer.normalize({"markdown": "Hello"}) == "Hello"


def test_only_one_level_is_unwrapped(normalizer):
    inner = json.dumps({"markdown": "deep"})
    outer = json.dumps({"markdown": inner})
    assert normalizer.normalize(outer) == inner


@pytest.mark.parametrize(
    "garbage",
    [
        "{not json at all",
        '{"other": "field"}',
        '{"markdown": 42}',
        "",
        None,
        12345,
        ["markdown"],
        {"markdown": None},
    ],
)
def test_garbage_is_returned_unchanged(normalizer, garbage):
    assert normalizer.normalize(garbage) == garbage


def test_json_array_string_is_kept(normalizer):
    assert normalizer.normalize('[{"markdown": "x"}]') == '[{"markdown": "x"}]'


def test_custom_field():
    assert ResultNormalizer("text").normalize('{"text": "plain"}') == "plain"
