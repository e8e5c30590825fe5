import pytest

from core.errors import MalformedResponseError
from scripts.helpers import load_json_reply, strip_code_fence


@pytest.mark.parametrize(
    "raw",
    [
        '{"a": 1}',
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        '  ```json{"a": 1}```  ',
    ],
)
def test_strip_code_fence_variants(raw):
    assert strip_code_fence(raw) == '{"a": 1}'


def test_load_json_reply_parses_fenced_array():
    assert load_json_reply('```json\n[1, 2]\n```') == [1, 2]


def test_load_json_reply_rejects_prose():
    with pytest.raises(MalformedResponseError):
        load_json_reply("Sure! Here is your recipe.")
