import re

from pydantic import BaseModel

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class Prompt(BaseModel):
    name: str
    version: str
    description: str
    inputs: dict[str, str]
    template: str

    class Config:
        extra = "forbid"

    def render(self, **values: str) -> str:
        """Fill ``{{ name }}`` placeholders with the given values.

        Every declared input must be supplied and nothing else may be.
        """
        unknown = set(values) - set(self.inputs)
        if unknown:
            raise ValueError(
                f"Unknown inputs for prompt '{self.name}': {sorted(unknown)}"
            )
        missing = set(self.inputs) - set(values)
        if missing:
            raise KeyError(f"Missing inputs for prompt '{self.name}': {sorted(missing)}")

        return _PLACEHOLDER.sub(lambda m: values[m.group(1)], self.template)
