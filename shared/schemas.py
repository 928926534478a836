from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire and in stored records.

    Unknown fields are kept so records round-trip whatever the client sent.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_record(self, **kwargs) -> dict:
        return self.model_dump(by_alias=True, **kwargs)
