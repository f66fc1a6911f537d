"""JsonModel base class for API and wire communication."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JsonModel(BaseModel):
    """Base model with camelCase on the wire and snake_case in Python.

    Request bodies are accepted in either casing; responses are emitted in
    camelCase, which is what the browser and upload clients expect.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def model_dump_json(self, **kwargs) -> str:
        """Serialize with camelCase keys unless told otherwise."""
        kwargs.setdefault("by_alias", True)
        return super().model_dump_json(**kwargs)

    def to_payload(self, *, exclude: set[str] | None = None) -> dict[str, Any]:
        """JSON-safe camelCase dict with unset optionals dropped.

        Used for outgoing HTTP bodies.
        """
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude=exclude,
        )
