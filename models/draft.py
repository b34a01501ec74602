from pydantic import BaseModel, Field, field_validator

DEFAULT_DRAFT_SERVINGS = 2
DEFAULT_DIFFICULTY = "leicht"


class Draft(BaseModel):
    """In-progress generation form, persisted so it survives a reload"""
    prompt: str = Field("", description="What the user wants to cook")
    difficulty: str = Field(DEFAULT_DIFFICULTY, description="Requested difficulty")
    servings: int = Field(DEFAULT_DRAFT_SERVINGS, description="Requested number of servings")
    wishes: str = Field("", description="Free-text wishes")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "json_schema_extra": {
            "example": {
                "prompt": "Pizza",
                "difficulty": "leicht",
                "servings": 2,
                "wishes": "vegetarisch"
            }
        }
    }

    @field_validator("servings", mode="before")
    @classmethod
    def parse_servings(cls, value) -> int:
        """Form input may arrive as text; anything unusable falls back to the default"""
        try:
            servings = int(value)
        except (TypeError, ValueError):
            return DEFAULT_DRAFT_SERVINGS
        return servings if servings > 0 else DEFAULT_DRAFT_SERVINGS

    @field_validator("difficulty", mode="before")
    @classmethod
    def default_difficulty(cls, value):
        return value or DEFAULT_DIFFICULTY

    @field_validator("prompt", "wishes", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return value if value is not None else ""

    def has_prompt(self) -> bool:
        return bool(self.prompt.strip())
