"""Wire schemas for the Gemini REST API (generateContent and models listing).

Only the fields this client reads or writes are modelled; unknown keys in
responses are ignored.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class InlineData(BaseModel):
    """Base64-encoded binary payload with its MIME type."""

    mime_type: str
    data: str


class Part(BaseModel):
    """One part of a content turn: either text or inline data."""

    text: Optional[str] = None
    inline_data: Optional[InlineData] = None


class Content(BaseModel):
    parts: List[Part]


class GenerateContentRequest(BaseModel):
    """Request body for models/{model}:generateContent."""

    contents: List[Content]

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


class ResponsePart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = None


class ResponseContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    parts: List[ResponsePart] = Field(default_factory=list)


class Candidate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: Optional[ResponseContent] = None


class GenerateContentResponse(BaseModel):
    """Success body of generateContent."""

    model_config = ConfigDict(extra="ignore")

    candidates: Optional[List[Candidate]] = None

    def first_text(self) -> Optional[str]:
        """Text of the first part of the first candidate, if any."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text


class ErrorDetail(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: Optional[int] = None
    message: Optional[str] = None
    status: Optional[str] = None


class ErrorEnvelope(BaseModel):
    """Error body returned with non-2xx statuses."""

    model_config = ConfigDict(extra="ignore")

    error: ErrorDetail


class ModelInfo(BaseModel):
    """Entry of the models listing, used for diagnostics."""

    model_config = ConfigDict(extra="ignore")

    name: str
    version: Optional[str] = None
    displayName: Optional[str] = None
    description: Optional[str] = None
    supportedGenerationMethods: Optional[List[str]] = None


class ListModelsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    models: List[ModelInfo] = Field(default_factory=list)
