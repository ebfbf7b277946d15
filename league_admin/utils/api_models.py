"""
Shared Pydantic base for request/response bodies.

Columns are snake_case in the database; the admin frontend speaks camelCase.
ApiModel serialises with camelCase aliases and accepts either spelling on input.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
