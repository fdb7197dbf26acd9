"""Wire models: content items, the success envelope, and introspection payloads."""
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageContent(BaseModel):
    type: Literal["image"] = "image"
    data: str  # base64
    mime_type: str = Field(alias="mimeType")

    model_config = {"populate_by_name": True}


ContentItem = Annotated[Union[TextContent, ImageContent], Field(discriminator="type")]


class StructuredContent(BaseModel):
    content: List[ContentItem]


class Envelope(BaseModel):
    """Successful tool response. ``content`` is never empty."""

    content: List[ContentItem]
    structured_content: Optional[StructuredContent] = Field(default=None, alias="structuredContent")

    model_config = {"populate_by_name": True}

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# ── Introspection ─────────────────────────────────────────────

class ToolSummary(BaseModel):
    name: str
    description: str


class ResourceSummary(BaseModel):
    uri: str
    name: str
    description: str
    mime_type: str = Field(default="application/json", alias="mimeType")

    model_config = {"populate_by_name": True}


class ServerIdentity(BaseModel):
    name: str
    version: str


class ServerInfo(BaseModel):
    identity: ServerIdentity
    start_time: datetime = Field(alias="startTime")
    uptime_seconds: float = Field(alias="uptimeSeconds")
    uptime_formatted: str = Field(alias="uptimeFormatted")
    tools: List[ToolSummary]
    resources: List[ResourceSummary]
    generated_at: datetime = Field(alias="generatedAt")

    model_config = {"populate_by_name": True}


class ResourceContents(BaseModel):
    uri: str
    mime_type: str = Field(alias="mimeType")
    text: str

    model_config = {"populate_by_name": True}
