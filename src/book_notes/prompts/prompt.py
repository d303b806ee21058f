from pydantic import BaseModel, ConfigDict


class Prompt(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    version: str
    description: str
    inputs: dict[str, str]
    template: str

    def render(self, **values: object) -> str:
        """Fill the template's {placeholders} with the declared inputs."""
        missing = self.inputs.keys() - values.keys()
        if missing:
            raise ValueError(
                f"Prompt '{self.name}' missing inputs: {', '.join(sorted(missing))}"
            )
        unknown = values.keys() - self.inputs.keys()
        if unknown:
            raise ValueError(
                f"Prompt '{self.name}' got undeclared inputs: "
                f"{', '.join(sorted(unknown))}"
            )
        return self.template.format(**values)
