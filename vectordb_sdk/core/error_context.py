# vectordb_sdk/core/error_context.py
# SPDX-License-Identifier: Apache-2.0

"""
Error context utilities for scoped handles.

Errors raised while a handle (database, collection, AI collection) runs an
operation are enriched with the scope they were raised in: the operation
name, the database and, where relevant, the collection. The context lives in
an exception attribute so the original type, message and traceback reach the
caller untouched.

Typical usage
-------------

    from vectordb_sdk.core.error_context import attach_context

    try:
        res = await dispatcher.request(req, DropRes)
    except VectorDBError as exc:
        attach_context(exc, operation="drop_collection", database="db", collection="c")
        raise

Later, in error handlers or observability systems:

    except VectorDBError as exc:
        context = get_context(exc)
        logger.error("vectordb call failed", extra={"operation": context.get("operation")})

Multiple calls merge rather than overwrite, so an outer layer can add keys
(a request id, a batch number) to what the handle already recorded. Keys
already present are kept; the innermost layer wins.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping

logger = logging.getLogger(__name__)

CONTEXT_ATTR = "__vectordb_context__"


def attach_context(exc: BaseException, **context: Any) -> None:
    """
    Attach scope metadata to an exception.

    Parameters
    ----------
    exc:
        The exception to enrich. Any BaseException is accepted.

    **context:
        Keys to record. Handles use ``operation``, ``database``,
        ``collection`` and ``kind``. Values are expected to be small,
        JSON-friendly scalars; never pass credentials.

    Attachment is best-effort: a failure is logged at DEBUG and never
    replaces the exception being propagated.
    """
    try:
        merged: MutableMapping[str, Any] = {}
        existing = getattr(exc, CONTEXT_ATTR, None)
        if isinstance(existing, Mapping):
            merged.update(existing)

        for key, value in context.items():
            merged.setdefault(key, value)

        setattr(exc, CONTEXT_ATTR, merged)
    except Exception as attachment_error:  # noqa: BLE001
        logger.debug(
            "Failed to attach error context to %s: %s",
            type(exc).__name__,
            attachment_error,
        )


def get_context(exc: BaseException) -> Mapping[str, Any]:
    """Return the attached context, or an empty dict if there is none."""
    ctx = getattr(exc, CONTEXT_ATTR, None)
    if isinstance(ctx, Mapping):
        return ctx
    return {}


__all__ = [
    "CONTEXT_ATTR",
    "attach_context",
    "get_context",
]
