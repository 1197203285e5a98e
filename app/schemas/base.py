from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class BaseSchema(BaseModel):
    """Request/response schema exposing camelCase keys on the wire"""
    model_config = ConfigDict(
        from_attributes=True,      # Allows reading from SQLAlchemy objects
        populate_by_name=True,     # Allows owner_id=1 or ownerId=1
        alias_generator=to_camel,
    )
