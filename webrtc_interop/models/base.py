"""Base for scenario, browser and harness settings records."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Record loaded from the catalog, a scenario file or CLI overrides.

    Records are frozen so a scenario cannot change between browsers of one
    run. Unknown keys are rejected so a misspelled field in a scenario file
    fails loudly instead of silently falling back to its default.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
