"""Placeholder substitution for story text."""
from __future__ import annotations

import logging
import re

from codex.script import ScriptContext

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{(.*?)\}")


def replace_vars(context: ScriptContext, text: str) -> str:
    """Expand every ``{expr}`` in ``text`` with the value of ``expr``.

    A failing expression renders as an empty string; the failure is logged and
    the rest of the text is still expanded.
    """
    if "{" not in text:
        return text

    def substitute(match: re.Match[str]) -> str:
        expression = match.group(1)
        value = context.evaluate(expression)
        if value.is_error:
            logger.error("Error evaluating expression {%s}: %s", expression, value.message)
            return ""
        return value.as_text()

    return PLACEHOLDER_PATTERN.sub(substitute, text)
