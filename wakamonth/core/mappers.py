"""Mapping raw activity API JSON into domain models."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from .config import UNKNOWN_BRANCH_NAME
from .errors import FetchError
from .models import UserModel


def map_user(raw: dict[str, Any]) -> UserModel:
    data = raw.get("data", raw) if isinstance(raw, dict) else {}
    user_id = data.get("id")
    if not user_id:
        raise FetchError(f"User payload carries no id: {raw!r}")
    username = data.get("username") or data.get("display_name") or str(user_id)
    return UserModel(id=str(user_id), username=str(username))


def extract_result_sets(payload: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Return the list of result-sets in a summaries payload.

    The summaries endpoint answers ``{"data": [{"branches": [...]}, ...]}``;
    a single object in ``data`` is tolerated as well.
    """
    if not payload:
        return []
    data = payload.get("data")
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    return [rs for rs in data if isinstance(rs, dict)]


def iter_branch_entries(result_sets: Iterable[dict[str, Any]]) -> Iterator[tuple[str, float, bool]]:
    """Yield ``(name, total_seconds, is_unallocated)`` for every branch entry."""
    for result_set in result_sets:
        for branch in result_set.get("branches") or []:
            if not isinstance(branch, dict):
                continue
            name = branch.get("name")
            if name is None:
                continue
            name = str(name)
            seconds = float(branch.get("total_seconds") or 0.0)
            yield name, seconds, is_unallocated_name(name)


def is_unallocated_name(name: str) -> bool:
    return name == UNKNOWN_BRANCH_NAME
