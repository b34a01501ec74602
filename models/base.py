from pydantic import BaseModel, Field
from uuid import uuid4


def new_id() -> str:
    """Generate an opaque unique token for stored entities"""
    return str(uuid4())


class BaseEntity(BaseModel):
    """Base entity class with common fields"""
    id: str = Field(default_factory=new_id)

    model_config = {
        "validate_assignment": True,
        "populate_by_name": True,
        "extra": "ignore",  # tolerate fields written by older app versions
        "json_schema_extra": {
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000"
            }
        }
    }

    def to_storage(self) -> dict:
        """Serialize with the camelCase keys used in persisted JSON"""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
