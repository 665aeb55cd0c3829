"""Responsive image markup and snippet documents."""

from html import escape
from typing import Dict, List, Sequence, Tuple

from .models import DerivativeOutput, MarkupBundle, RequestConfig

BATCH_SEPARATOR = "\n---\n\n"


def _attr(value: str) -> str:
    return escape(value, quote=True)


def build_srcsets(outputs: Sequence[DerivativeOutput]) -> Dict[str, List[str]]:
    """Group outputs into ``"name 480w"`` entries per format, ascending width."""
    srcsets: Dict[str, List[str]] = {"webp": [], "avif": []}
    for output in sorted(outputs, key=lambda o: o.width):
        srcsets[output.format].append(f"{output.file_name} {output.width}w")
    return srcsets


def compose_markup(
    outputs: Sequence[DerivativeOutput],
    feasible_widths: Sequence[int],
    config: RequestConfig,
) -> MarkupBundle:
    """
    Build the ``<img>`` and ``<picture>`` variants for one image.

    The ``<img>`` points at webp derivatives when webp was requested, else
    avif. ``<picture>`` lists avif before webp and is only distinct from
    ``<img>`` when more than one format was requested. Alt text is left
    empty for the author to fill in.
    """
    srcsets = build_srcsets(outputs)
    primary = "webp" if "webp" in config.formats else "avif"
    smallest = min(feasible_widths)
    base_src = next(
        (o.file_name for o in outputs if o.format == primary and o.width == smallest),
        f"{config.base_name}-{smallest}.{primary}",
    )
    sizes = _attr(config.sizes_attr)

    img_tag = (
        "<img\n"
        f'  src="{_attr(base_src)}"\n'
        f'  srcset="{_attr(", ".join(srcsets[primary]))}"\n'
        f'  sizes="{sizes}"\n'
        '  alt=""\n'
        '  loading="lazy"\n'
        '  decoding="async"\n'
        "/>"
    )

    if len(config.formats) < 2:
        return MarkupBundle(img_tag=img_tag, picture_tag=img_tag)

    lines = ["<picture>"]
    for fmt in ("avif", "webp"):
        if srcsets[fmt]:
            lines.append(
                f'  <source type="image/{fmt}" '
                f'srcset="{_attr(", ".join(srcsets[fmt]))}" sizes="{sizes}">'
            )
    lines.append(f'  <img src="{_attr(base_src)}" alt="" loading="lazy" decoding="async">')
    lines.append("</picture>")

    return MarkupBundle(img_tag=img_tag, picture_tag="\n".join(lines))


def _summary_line(widths: Sequence[int], formats: Sequence[str]) -> str:
    return (
        f"<!-- widths: {', '.join(str(w) for w in widths)} "
        f"| formats: {', '.join(formats)} -->"
    )


def render_snippet_document(
    bundle: MarkupBundle, feasible_widths: Sequence[int], config: RequestConfig
) -> str:
    """The ``snippet.html`` document for a single-image request."""
    return (
        "<!-- WebReady output -->\n"
        f"{_summary_line(feasible_widths, config.formats)}\n"
        f"<!-- sizes: {config.sizes_attr} -->\n"
        "\n"
        "<!-- Option A: <img> -->\n"
        f"{bundle.img_tag}\n"
        "\n"
        "<!-- Option B: <picture> -->\n"
        f"{bundle.picture_tag}\n"
    )


def render_image_block(
    name: str,
    bundle: MarkupBundle,
    feasible_widths: Sequence[int],
    formats: Sequence[str],
) -> str:
    """One image's section of the combined batch document."""
    return (
        f"<!-- {name} -->\n"
        f"{_summary_line(feasible_widths, formats)}\n"
        "\n"
        f"{bundle.img_tag}\n"
        "\n"
        "<!-- Or use <picture> for multiple formats: -->\n"
        f"{bundle.picture_tag}\n"
        "\n"
    )


def render_batch_document(
    blocks: Sequence[str],
    image_count: int,
    config: RequestConfig,
    skipped: Sequence[Tuple[str, str]] = (),
) -> str:
    """
    The combined ``snippets.html`` document for a batch request.

    The header counts processed images against everything submitted.
    """
    total = image_count + len(skipped)
    header = [
        "<!-- WebReady Batch Output -->",
        f"<!-- {image_count} of {total} images processed -->",
    ]
    if skipped:
        names = ", ".join(name for name, _ in skipped)
        header.append(f"<!-- {len(skipped)} skipped: {names} -->")
    header.append(_summary_line(config.widths, config.formats))

    return "\n".join(header) + "\n\n" + BATCH_SEPARATOR.join(blocks) + "\n"
