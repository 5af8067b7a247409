"""
Flow runtime: schema-typed prompts delegated to a model provider.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from data_uri import parse_data_uri
from providers.base import MediaPart, ModelProvider

logger = logging.getLogger("court_scribe.flows")

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


class FlowError(Exception):
    """Exception raised when a flow cannot produce a valid output."""

    def __init__(self, message: str, flow: str, original_error: Optional[Exception] = None):
        self.message = message
        self.flow = flow
        self.original_error = original_error
        super().__init__(message)


class FlowInputError(FlowError):
    """Exception raised when a flow payload violates its input schema."""


@dataclass
class Flow(Generic[InputT, OutputT]):
    """
    A named, schema-typed call to a hosted model.

    Attributes:
        name: Flow name used in logs and error messages
        input_schema: Pydantic model the payload is validated against
        output_schema: Pydantic model the model response must satisfy
        prompt_template: str.format template filled from the input fields
        media_field: Name of the input field holding an audio data URI, if any
        label: Human readable name used in error messages
    """
    name: str
    input_schema: Type[InputT]
    output_schema: Type[OutputT]
    prompt_template: str
    media_field: Optional[str] = None
    label: str = ""

    def validate_input(self, payload: Union[InputT, Dict[str, Any]]) -> InputT:
        if isinstance(payload, self.input_schema):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        try:
            return self.input_schema.model_validate(payload)
        except ValidationError as e:
            raise FlowInputError(f"Invalid input for {self.name}: {e}", self.name, original_error=e)

    def render_prompt(self, data: InputT) -> str:
        fields = {key: value for key, value in data.model_dump().items() if key != self.media_field}
        return self.prompt_template.format(**fields)

    def run(self, payload: Union[InputT, Dict[str, Any]], provider: ModelProvider) -> OutputT:
        """
        Validate the payload, call the provider and return its validated output.

        Raises:
            FlowInputError: If the payload does not match input_schema
            FlowError: If the model returned nothing
            ProviderError: If the model call itself failed
        """
        data = self.validate_input(payload)
        prompt = self.render_prompt(data)

        media = None
        if self.media_field:
            try:
                mime_type, audio = parse_data_uri(getattr(data, self.media_field))
            except ValueError as e:
                raise FlowInputError(f"Invalid input for {self.name}: {e}", self.name, original_error=e)
            media = [MediaPart(mime_type=mime_type, data=audio)]

        logger.debug("Running %s with %s", self.name, provider.name)
        output = provider.generate(prompt, self.output_schema, media=media)

        if output is None:
            raise FlowError(f"{self.label or self.name} failed to produce an output.", self.name)

        return output
