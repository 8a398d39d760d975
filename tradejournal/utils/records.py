"""Uniform field access for trade-shaped records (ORM rows, dataclasses or dicts)."""

from collections.abc import Mapping


def get_field(record, name: str, default=None):
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)
