"""Locate a JSON object inside free-form model output."""

import re

from depwise.errors import ResponseParseError

FENCED_BLOCK_PATTERN = re.compile(r"```(?:json|JSON)?[ \t]*\r?\n?(.*?)```", re.DOTALL)


def extract_json_object(text: str, service: str = "") -> str:
    """Extract the JSON object a model reply contains.

    Models often wrap their JSON in a fenced code block or surround it with
    prose. A fenced block wins when present; otherwise the first balanced
    ``{...}`` span is returned. Braces inside JSON string literals are
    ignored while balancing.

    Args:
        text: Raw model reply.
        service: Backend name used in error messages.

    Returns:
        The JSON object text, stripped of surrounding whitespace.

    Raises:
        ResponseParseError: If the reply holds no balanced object.
    """
    match = FENCED_BLOCK_PATTERN.search(text)
    if match:
        block = match.group(1).strip()
        if block.startswith("{"):
            return _balanced_object(block, 0) or block
        if "{" in block:
            text = block

    start = text.find("{")
    if start == -1:
        raise ResponseParseError(service, "no JSON object found in response")

    obj = _balanced_object(text, start)
    if obj is None:
        raise ResponseParseError(service, "unbalanced JSON object in response")
    return obj


def _balanced_object(text: str, start: int) -> str | None:
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        char = text[i]

        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1].strip()

    return None
