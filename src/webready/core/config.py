"""Request configuration resolver and service settings."""

import os
import re
from typing import List, Optional

from pydantic import BaseModel, Field

from .exceptions import ConfigurationError
from .models import (
    CANONICAL_FORMATS,
    ImageFormat,
    RawRequestParams,
    RequestConfig,
    ResolverDefaults,
)

QUALITY_MIN = 1
QUALITY_MAX = 100

# Leading integer, the way HTML form values are usually read ("480px" -> 480).
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_TRAILING_EXTENSION = re.compile(r"\.[^.]+$")


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of `value`, or return None."""
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _split(value: str) -> List[str]:
    return [token.strip() for token in value.split(",")]


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def resolve_widths(
    raw: Optional[str], defaults: ResolverDefaults, problems: List[str]
) -> List[int]:
    """Ascending, deduplicated positive widths; defaults when none survive."""
    if _blank(raw):
        return sorted(set(defaults.breakpoints))

    widths = set()
    for token in _split(raw):
        width = parse_int(token)
        if width is None or width <= 0:
            problems.append(f"invalid width {token!r}")
            continue
        widths.add(width)

    return sorted(widths) if widths else sorted(set(defaults.breakpoints))


def resolve_formats(
    raw: Optional[str], defaults: ResolverDefaults, problems: List[str]
) -> List[ImageFormat]:
    """Known formats in request order; defaults when none survive."""
    if _blank(raw):
        return list(defaults.formats)

    formats: List[ImageFormat] = []
    for token in _split(raw.lower()):
        if token not in CANONICAL_FORMATS:
            problems.append(f"unsupported format {token!r}")
            continue
        if token not in formats:
            formats.append(token)  # type: ignore[arg-type]

    return formats or list(defaults.formats)


def resolve_quality(
    raw: Optional[str], default: int, label: str, problems: List[str]
) -> int:
    """Clamp to [1, 100]; absent or non-numeric input yields `default`."""
    if _blank(raw):
        return default

    quality = parse_int(raw)
    if quality is None:
        problems.append(f"{label} is not a number: {raw!r}")
        return default
    if not QUALITY_MIN <= quality <= QUALITY_MAX:
        problems.append(f"{label} out of range: {quality}")
    return min(QUALITY_MAX, max(QUALITY_MIN, quality))


def derive_base_name(basename: Optional[str], original_name: Optional[str]) -> str:
    """Explicit base name, else the upload's stem, else ``"image"``."""
    if not _blank(basename):
        return str(basename).strip()
    if not _blank(original_name):
        # Clients may send a full path; only the last component is a name.
        leaf = re.split(r"[\\/]", str(original_name).strip())[-1]
        stem = _TRAILING_EXTENSION.sub("", leaf)
        if stem:
            return stem
    return "image"


def default_sizes_attr(widths: List[int]) -> str:
    """Build the fallback ``sizes`` attribute from ascending widths."""
    first = widths[0]
    second = widths[1] if len(widths) > 1 else first
    return (
        f"(max-width: {first}px) 100vw, "
        f"(max-width: {second}px) 50vw, "
        f"{widths[-1]}px"
    )


def resolve_config(
    params: Optional[RawRequestParams] = None,
    defaults: Optional[ResolverDefaults] = None,
    original_name: Optional[str] = None,
    strict: bool = False,
) -> RequestConfig:
    """
    Turn raw request fields into a validated RequestConfig.

    Malformed values degrade to defaults. With ``strict=True`` any dropped
    or clamped value raises ConfigurationError instead.
    """
    params = params or RawRequestParams()
    defaults = defaults or ResolverDefaults()
    problems: List[str] = []

    widths = resolve_widths(params.widths, defaults, problems)
    formats = resolve_formats(params.formats, defaults, problems)
    quality_webp = resolve_quality(
        params.quality_webp, defaults.quality_webp, "quality_webp", problems
    )
    quality_avif = resolve_quality(
        params.quality_avif, defaults.quality_avif, "quality_avif", problems
    )

    if strict and problems:
        raise ConfigurationError("Invalid request parameters: " + "; ".join(problems))

    sizes_attr = (
        str(params.sizes).strip()
        if not _blank(params.sizes)
        else default_sizes_attr(widths)
    )

    return RequestConfig(
        widths=widths,
        formats=formats,
        quality_webp=quality_webp,
        quality_avif=quality_avif,
        base_name=derive_base_name(params.basename, original_name),
        sizes_attr=sizes_attr,
    )


def load_resolver_defaults() -> ResolverDefaults:
    """
    Build resolver defaults from the environment.

    Environment Variables:
        WEBREADY_DEFAULT_WIDTHS: Comma separated breakpoints
        WEBREADY_DEFAULT_FORMATS: Comma separated formats (webp, avif)
        WEBREADY_QUALITY_WEBP: Default WebP quality
        WEBREADY_QUALITY_AVIF: Default AVIF quality
    """
    base = ResolverDefaults()
    ignored: List[str] = []
    return ResolverDefaults(
        breakpoints=resolve_widths(
            os.getenv("WEBREADY_DEFAULT_WIDTHS"), base, ignored
        ),
        formats=resolve_formats(os.getenv("WEBREADY_DEFAULT_FORMATS"), base, ignored),
        quality_webp=resolve_quality(
            os.getenv("WEBREADY_QUALITY_WEBP"), base.quality_webp, "quality_webp", ignored
        ),
        quality_avif=resolve_quality(
            os.getenv("WEBREADY_QUALITY_AVIF"), base.quality_avif, "quality_avif", ignored
        ),
    )


class ServiceSettings(BaseModel):
    """Limits and defaults for the request surfaces."""

    max_file_size: int = Field(default=25 * 1024 * 1024, gt=0)
    max_files: int = Field(default=50, gt=0)
    processor: str = "serial"
    resolver_defaults: ResolverDefaults = Field(default_factory=ResolverDefaults)

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        """
        Load settings from environment variables.

        Environment Variables:
            WEBREADY_MAX_FILE_SIZE: Per-file upload cap in bytes
            WEBREADY_MAX_FILES: Maximum files per batch
            WEBREADY_PROCESSOR: Batch strategy (serial, multithread, multiprocess, asyncio)
        """
        defaults = cls()
        max_file_size = parse_int(os.getenv("WEBREADY_MAX_FILE_SIZE"))
        max_files = parse_int(os.getenv("WEBREADY_MAX_FILES"))
        return cls(
            max_file_size=max_file_size if max_file_size and max_file_size > 0 else defaults.max_file_size,
            max_files=max_files if max_files and max_files > 0 else defaults.max_files,
            processor=os.getenv("WEBREADY_PROCESSOR", defaults.processor),
            resolver_defaults=load_resolver_defaults(),
        )
