"""
Pure text rewrites applied to generated files while bundling.
"""
from __future__ import annotations

import re
from typing import Callable, Iterable, List, Tuple

from msgbundle.domain.models import RewriteRule

CompiledRule = Tuple["re.Pattern[str]", str]


def compile_rules(rules: Iterable[RewriteRule]) -> List[CompiledRule]:
    return [(re.compile(rule.pattern, re.MULTILINE), rule.replacement) for rule in rules]


def apply_rules(text: str, rules: Iterable[RewriteRule]) -> str:
    """Apply every rule, in order, to the full text."""
    for pattern, replacement in compile_rules(rules):
        text = pattern.sub(replacement, text)
    return text


def make_rewriter(rules: Iterable[RewriteRule]) -> Callable[[str], str]:
    """Return a ``text -> text`` callable with the rules compiled once."""
    compiled = compile_rules(rules)

    def rewrite(text: str) -> str:
        for pattern, replacement in compiled:
            text = pattern.sub(replacement, text)
        return text

    return rewrite
