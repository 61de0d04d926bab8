"""Render module schemas and pipeline value types."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# REQUESTS
# =============================================================================

class RenderMode(str, Enum):
    """Output format for a conversion job."""

    PDF = "pdf"
    DECK = "deck"
    DECK_PREVIEW = "deck_preview"


# Units accepted by the print pipeline; bare zero is allowed
CSS_LENGTH_PATTERN = r"^(0|\d+(\.\d+)?(px|in|cm|mm))$"


class MarginSpec(BaseModel):
    """Four-sided page margin, each side a CSS length (e.g. "1cm", "0.5in")."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    top: str | None = Field(default=None, pattern=CSS_LENGTH_PATTERN)
    right: str | None = Field(default=None, pattern=CSS_LENGTH_PATTERN)
    bottom: str | None = Field(default=None, pattern=CSS_LENGTH_PATTERN)
    left: str | None = Field(default=None, pattern=CSS_LENGTH_PATTERN)

    def as_pdf_margin(self) -> dict[str, str]:
        """Margin dict for page.pdf(); unset sides are omitted."""
        return self.model_dump(exclude_none=True)


class ConvertOptions(BaseModel):
    """Recognized conversion options."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    margin: MarginSpec | None = None


class ConvertRequest(BaseModel):
    """Request body for all conversion routes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    html_content: str = Field(
        default="",
        alias="htmlContent",
        description="Structural HTML; elements with class 'slide' become slides",
    )
    options: ConvertOptions = Field(default_factory=ConvertOptions)


# =============================================================================
# RESPONSES
# =============================================================================

class PreviewResponse(BaseModel):
    """Deck preview payload."""

    model_config = ConfigDict(populate_by_name=True)

    images: list[str]
    slide_count: int = Field(..., alias="slideCount")


# =============================================================================
# PIPELINE VALUES
# =============================================================================

@dataclass(frozen=True)
class Canvas:
    """Fixed pixel canvas a document is laid out and captured on."""

    width: int
    height: int
    scale: float = 1.0

    @property
    def clip(self) -> dict[str, float]:
        return {"x": 0, "y": 0, "width": self.width, "height": self.height}

    @property
    def viewport(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}


# A4 at 96 DPI
PDF_CANVAS = Canvas(width=794, height=1123, scale=1)
# 16:9 at 2x device scale
DECK_CANVAS = Canvas(width=960, height=540, scale=2)


@dataclass(frozen=True)
class StyleSet:
    """Styles extracted from the source document, in source order."""

    inline: tuple[str, ...] = ()
    external: tuple[str, ...] = ()


@dataclass(frozen=True)
class Slide:
    """One slide's inner markup."""

    index: int
    fragment_html: str


@dataclass(frozen=True)
class RenderedArtifact:
    """Bytes captured from one render."""

    data: bytes
    mime_type: str


@dataclass(frozen=True)
class AssembledDocument:
    """Final payload handed to the response layer."""

    mode: RenderMode
    mime_type: str
    data: bytes | None = None
    filename: str | None = None
    images: tuple[str, ...] = ()

    @property
    def slide_count(self) -> int:
        return len(self.images)
