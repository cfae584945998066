from typing import Any, Dict, Iterable

from pydantic import BaseModel


def model_values(schema: BaseModel, json_fields: Iterable[str] = (), exclude_unset: bool = False) -> Dict[str, Any]:
    """
    Поля схемы для записи в модель.
    JSON-колонки дампятся в json-режиме (Decimal -> str), остальные как есть.
    """
    json_fields = set(json_fields)
    values = schema.model_dump(exclude_unset=exclude_unset, exclude=json_fields)
    values.update(schema.model_dump(mode="json", exclude_unset=exclude_unset, include=json_fields))
    return values


def apply_values(obj: Any, values: Dict[str, Any]) -> Any:
    for field, value in values.items():
        setattr(obj, field, value)
    return obj
