"""
Request schema helpers shared by route modules.
"""

from pydantic import field_validator


def non_nullable(*fields: str):
    """
    Validator for PATCH payloads: the listed fields may be omitted but not
    sent as null, since their columns are NOT NULL.
    """

    def check(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    return field_validator(*fields)(check)


def dump(entity) -> dict:
    return entity.model_dump(mode="json")


def dump_all(entities) -> list:
    return [entity.model_dump(mode="json") for entity in entities]
