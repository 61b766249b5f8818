"""Storage key codec for association entries.

Layout: ``<len(scope)>:<scope>:<tag>:<id>`` where ``tag`` is the one-character
direction marker. The decimal length in front of the scope fixes where the
scope ends, so scopes and ids may hold any UTF-8 encodable text, ``:`` and
NUL included.
"""

from __future__ import annotations

from pairstore.core.models import Direction


def scope_prefix(scope: str) -> str:
    return f"{len(scope)}:{scope}:"


def encode_key(scope: str, direction: Direction, item_id: str) -> str:
    return f"{scope_prefix(scope)}{Direction(direction).value}:{item_id}"


def primary_key(scope: str, primary_id: str) -> str:
    return encode_key(scope, Direction.PRIMARY, primary_id)


def external_key(scope: str, external_id: str) -> str:
    return encode_key(scope, Direction.EXTERNAL, external_id)
