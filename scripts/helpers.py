import re
import json
from typing import Any

from core.errors import MalformedResponseError

_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def strip_code_fence(raw: str) -> str:
    """Drop one ```json … ``` (or bare ```) fence around a model reply."""
    text = raw.strip()
    match = _FENCE.match(text)
    return match.group(1).strip() if match else text


def load_json_reply(raw: str) -> Any:
    text = strip_code_fence(raw)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Model reply is not valid JSON: {e}") from e
