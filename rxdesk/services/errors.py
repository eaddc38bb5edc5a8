# FILE: rxdesk/services/errors.py
from __future__ import annotations

from dataclasses import dataclass


class NotFoundError(Exception):
    """A prescription, patient or doctor reference could not be resolved."""

    def __init__(self, entity: str, entity_id: object = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} not found")


@dataclass(frozen=True)
class DerivedFieldError:
    field: str
    reason: str


@dataclass(frozen=True)
class AssetLoadError:
    ref: str
    reason: str
