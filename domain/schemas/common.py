from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Base for catalog schemas: snake_case in Python, camelCase on the wire and in MongoDB."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    def changes(self) -> dict:
        """Fields the caller explicitly set, keyed by Python attribute name."""
        return self.model_dump(exclude_unset=True)
