# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/utils/serialize.py

from dataclasses import is_dataclass, asdict
from enum import Enum
from typing import Any
from pydantic import BaseModel

from ..resources.models import ManagedResource, ResourceRef


def to_jsonable(obj: Any) -> Any:
    if isinstance(obj, ManagedResource):
        return to_jsonable(obj.to_dict())

    if isinstance(obj, ResourceRef):
        return str(obj)

    if isinstance(obj, BaseModel):
        return to_jsonable(obj.model_dump())

    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))

    if isinstance(obj, dict):
        return {k: to_jsonable(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]

    if isinstance(obj, Enum):
        return obj.value

    return obj
