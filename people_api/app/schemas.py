from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # JSON bodies use camelCase; unknown keys such as "id" are ignored.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonCreate(_CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)


class PersonUpdate(_CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def _required_fields_not_null(self):
        for name in sorted(self.model_fields_set):
            if getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} may not be null")
        return self
