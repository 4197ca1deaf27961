"""Shared pydantic base for entity and API models.

Python attributes are snake_case; the wire format and persisted snapshots use
camelCase (``userId``, ``electionId``), matching the browser client's
storage layout.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
