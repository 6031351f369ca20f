"""Structural rewrite of wrapper values around converted storage."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable

from .errors import WrapperTypeError
from .kinds import kind_info
from .wrappers import wrapper_kind

logger = logging.getLogger(__name__)

Policy = Callable[[object], object]


def adapt(policy: Policy, value: object) -> object:
    """Convert the innermost storage of `value` with `policy`, keeping its wrapper shape.

    Values that are not registered wrappers are leaves and go straight to
    `policy`. Exceptions raised by `policy` propagate unchanged.
    """
    if wrapper_kind(value) is None:
        return policy(value)
    return adapt_structure(policy, value)


def adapt_structure(policy: Policy, value: object) -> object:
    kind = wrapper_kind(value)
    if kind is None:
        raise WrapperTypeError(f"{type(value).__name__} is not a registered wrapper")
    info = kind_info(kind)
    logger.debug("adapting %s: converting %s, forwarding %s", kind.value, info.converted, info.forwarded)

    changes: dict[str, object] = {}
    for slot in info.converted:
        current = getattr(value, slot)
        if slot in info.sequence_slots:
            changes[slot] = tuple(adapt(policy, item) for item in current)
        else:
            changes[slot] = adapt(policy, current)
    return dataclasses.replace(value, **changes)
