"""Branch classification into development and maintenance work."""

from __future__ import annotations

import re
from collections.abc import Callable

from wakamonth.core.config import CATEGORY_DEVELOPMENT, CATEGORY_MAINTENANCE
from wakamonth.core.models import compile_ignore_pattern

Classifier = Callable[[str], str]


def regex_classifier(pattern: re.Pattern | str | None) -> Classifier:
    """Build a classifier where a ``re.search`` hit means maintenance."""
    compiled = pattern if isinstance(pattern, re.Pattern) else compile_ignore_pattern(pattern)

    def classify(branch_name: str) -> str:
        if compiled.search(branch_name):
            return CATEGORY_MAINTENANCE
        return CATEGORY_DEVELOPMENT

    return classify


def is_development(classify: Classifier, branch_name: str) -> bool:
    return classify(branch_name) == CATEGORY_DEVELOPMENT
