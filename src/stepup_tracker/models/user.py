"""User session model."""
from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Singleton user record, overwritten wholesale on save."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    email: str = ""
    is_logged_in: bool = Field(default=False, alias="isLoggedIn")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)
