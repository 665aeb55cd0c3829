"""Shared data models for the WebReady pipeline."""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

ImageFormat = Literal["webp", "avif"]

# Encode order within one width; markup order is handled separately.
CANONICAL_FORMATS: Tuple[ImageFormat, ...] = ("webp", "avif")

CONTENT_TYPES = {"webp": "image/webp", "avif": "image/avif"}


class RawRequestParams(BaseModel):
    """Unparsed request fields as submitted by a client."""

    widths: Optional[str] = None
    formats: Optional[str] = None
    quality_webp: Optional[str] = None
    quality_avif: Optional[str] = None
    basename: Optional[str] = None
    sizes: Optional[str] = None


class ResolverDefaults(BaseModel):
    """Fallback values used when request fields are absent or malformed."""

    breakpoints: List[int] = Field(default_factory=lambda: [480, 768, 1200])
    formats: List[ImageFormat] = Field(default_factory=lambda: ["webp"])
    quality_webp: int = Field(default=82, ge=1, le=100)
    quality_avif: int = Field(default=55, ge=1, le=100)


class RequestConfig(BaseModel):
    """Validated configuration for one request."""

    widths: List[int]
    formats: List[ImageFormat]
    quality_webp: int = Field(default=82, ge=1, le=100)
    quality_avif: int = Field(default=55, ge=1, le=100)
    base_name: str = "image"
    sizes_attr: str = ""

    def quality_for(self, fmt: ImageFormat) -> int:
        """Return the configured quality for an output format."""
        return self.quality_webp if fmt == "webp" else self.quality_avif

    def encode_formats(self) -> List[ImageFormat]:
        """Requested formats in encode order (webp before avif)."""
        return [fmt for fmt in CANONICAL_FORMATS if fmt in self.formats]


class ImageUpload(BaseModel):
    """One submitted image file."""

    file_name: str = ""
    data: bytes
    base_name: Optional[str] = None


class ImageDimensions(BaseModel):
    """Intrinsic size reported by the codec."""

    width: int
    height: int


class SourceImage(BaseModel):
    """A probed original image."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    intrinsic_width: int
    intrinsic_height: int = 0
    original_name: str = ""


class DerivativeOutput(BaseModel):
    """One encoded derivative (a single width in a single format)."""

    file_name: str
    format: ImageFormat
    width: int
    data: bytes

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES[self.format]


class GenerationResult(BaseModel):
    """Outputs produced for one image plus the widths actually used."""

    outputs: List[DerivativeOutput] = Field(default_factory=list)
    feasible_widths: List[int] = Field(default_factory=list)


class MarkupBundle(BaseModel):
    """The two markup variants describing one image's derivatives."""

    img_tag: str
    picture_tag: str


class ImageResult(BaseModel):
    """Result of processing a single image within a batch."""

    source_name: str
    base_name: str = ""
    success: bool = False
    error: str = ""
    error_type: str = ""
    outputs: List[DerivativeOutput] = Field(default_factory=list)
    feasible_widths: List[int] = Field(default_factory=list)
    markup: Optional[MarkupBundle] = None
    processing_time: float = 0.0


class BatchResult(BaseModel):
    """Aggregated outcome of a batch run."""

    outputs: List[DerivativeOutput] = Field(default_factory=list)
    markup: List[Tuple[str, MarkupBundle]] = Field(default_factory=list)
    skipped: List[Tuple[str, str]] = Field(default_factory=list)
    document: str = ""

    @property
    def image_count(self) -> int:
        return len(self.markup)


class ArchiveResult(BaseModel):
    """A finished archive ready to hand back to the caller."""

    file_name: str
    data: bytes
    entries: List[str] = Field(default_factory=list)
    skipped: List[Tuple[str, str]] = Field(default_factory=list)
