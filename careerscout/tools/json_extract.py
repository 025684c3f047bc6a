"""Permissive JSON extraction from free-form model output."""

from __future__ import annotations

import json
import logging
from typing import Iterator, TypeVar

import pydantic
from pydantic import BaseModel

from careerscout.errors import ParseError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_CLOSERS = {"{": "}", "[": "]"}


def _balanced_span(text: str, start: int) -> str | None:
    """The bracket-balanced span opening at ``text[start]``, skipping string literals."""
    stack: list[str] = []
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("}", "]"):
            if not stack or stack.pop() != ch:
                return None
            if not stack:
                return text[start : i + 1]
    return None


def iter_json_spans(text: str | None) -> Iterator[str]:
    """Yield every balanced ``{...}`` or ``[...]`` span, in order of its opening bracket.

    A span that fails to balance does not end the scan; the next opening
    bracket is tried instead.
    """
    if not text:
        return
    pos = 0
    while True:
        starts = [i for i in (text.find("{", pos), text.find("[", pos)) if i != -1]
        if not starts:
            return
        start = min(starts)
        span = _balanced_span(text, start)
        if span is not None:
            yield span
            pos = start + len(span)
        else:
            pos = start + 1


def extract_json(text: str | None) -> str | None:
    """Return the first balanced ``{...}`` or ``[...]`` span in ``text``.

    The model may wrap its payload in prose or markdown fences. Returns None
    when no balanced span exists.
    """
    return next(iter_json_spans(text), None)


def _decoded_spans(raw: str | None) -> list[object]:
    decoded = []
    for span in iter_json_spans(raw):
        try:
            decoded.append(json.loads(span))
        except json.JSONDecodeError:
            logger.debug("Skipping undecodable JSON candidate: %.60s", span)
    return decoded


def load_json(raw: str | None) -> object:
    """Decode the first JSON payload in ``raw``, raising ParseError on failure."""
    if extract_json(raw) is None:
        raise ParseError("No JSON found in model response")
    decoded = _decoded_spans(raw)
    if not decoded:
        raise ParseError("JSON parse error: no candidate in the model response decodes")
    return decoded[0]


def parse_llm_output(raw: str | None, schema: type[ModelT]) -> ModelT:
    """Validate the first JSON payload in ``raw`` that fits ``schema``.

    Earlier spans that only look like JSON (``[1]`` in the prose, say) are
    skipped when a later one validates.
    """
    error: pydantic.ValidationError | None = None
    for data in _decoded_spans(raw):
        try:
            return schema.model_validate(data)
        except pydantic.ValidationError as e:
            error = error or e
    if error is None:
        # Nothing decoded; load_json raises the matching ParseError.
        load_json(raw)
        raise ParseError("No JSON found in model response")
    raise ParseError(f"{schema.__name__} validation error: {error.error_count()} issue(s)") from error
