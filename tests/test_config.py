"""Tests for the request configuration resolver."""

import os
from unittest.mock import patch

import pytest

from webready.core.config import (
    ServiceSettings,
    default_sizes_attr,
    derive_base_name,
    load_resolver_defaults,
    parse_int,
    resolve_config,
)
from webready.core.exceptions import ConfigurationError
from webready.core.models import RawRequestParams, ResolverDefaults


class TestParseInt:
    """Tests for lenient integer parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("480", 480),
            (" 768 ", 768),
            ("480px", 480),
            ("3.9", 3),
            ("-5", -5),
            ("abc", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse_int(self, raw, expected):
        """Leading digits are read, everything else is non-numeric."""
        assert parse_int(raw) == expected


class TestWidths:
    """Tests for width resolution."""

    def test_absent_widths_use_default_breakpoints(self):
        config = resolve_config(RawRequestParams())
        assert config.widths == [480, 768, 1200]

    def test_widths_sorted_and_deduplicated(self):
        config = resolve_config(RawRequestParams(widths="1200, 480,768,480,1200"))
        assert config.widths == [480, 768, 1200]

    def test_invalid_tokens_dropped(self):
        config = resolve_config(RawRequestParams(widths="abc,0,-10,640,,320"))
        assert config.widths == [320, 640]

    def test_all_invalid_falls_back_to_defaults(self):
        config = resolve_config(RawRequestParams(widths="zero,-1,0"))
        assert config.widths == [480, 768, 1200]

    def test_custom_default_breakpoints(self):
        defaults = ResolverDefaults(breakpoints=[300, 600])
        config = resolve_config(RawRequestParams(), defaults)
        assert config.widths == [300, 600]


class TestFormats:
    """Tests for format resolution."""

    def test_default_format_is_webp(self):
        assert resolve_config(RawRequestParams()).formats == ["webp"]

    def test_formats_lowercased_trimmed_and_filtered(self):
        config = resolve_config(RawRequestParams(formats=" WEBP , gif, Avif"))
        assert config.formats == ["webp", "avif"]

    def test_request_order_and_dedupe_preserved(self):
        config = resolve_config(RawRequestParams(formats="avif,webp,avif"))
        assert config.formats == ["avif", "webp"]
        assert config.encode_formats() == ["webp", "avif"]

    def test_unknown_formats_fall_back_to_webp(self):
        config = resolve_config(RawRequestParams(formats="png,jpeg"))
        assert config.formats == ["webp"]


class TestQuality:
    """Tests for quality clamping."""

    def test_defaults(self):
        config = resolve_config(RawRequestParams())
        assert config.quality_webp == 82
        assert config.quality_avif == 55

    @pytest.mark.parametrize("raw,expected", [("0", 1), ("500", 100), ("-3", 1), ("75", 75)])
    def test_clamped_to_valid_range(self, raw, expected):
        config = resolve_config(RawRequestParams(quality_webp=raw, quality_avif=raw))
        assert config.quality_webp == expected
        assert config.quality_avif == expected

    def test_non_numeric_uses_defaults(self):
        config = resolve_config(RawRequestParams(quality_webp="high", quality_avif="low"))
        assert config.quality_webp == 82
        assert config.quality_avif == 55


class TestBaseNameAndSizes:
    """Tests for base name and sizes attribute resolution."""

    def test_explicit_basename_wins(self):
        config = resolve_config(RawRequestParams(basename="hero"), original_name="x.jpg")
        assert config.base_name == "hero"

    def test_basename_from_original_name(self):
        config = resolve_config(RawRequestParams(), original_name="photo.final.jpg")
        assert config.base_name == "photo.final"

    def test_basename_falls_back_to_image(self):
        assert resolve_config(RawRequestParams()).base_name == "image"
        assert derive_base_name("  ", "") == "image"

    def test_basename_strips_directories(self):
        assert derive_base_name(None, "C:\\Users\\me\\cat.png") == "cat"
        assert derive_base_name(None, "../../etc/dog.jpg") == "dog"

    def test_default_sizes_attr(self):
        assert default_sizes_attr([480, 768, 1200]) == (
            "(max-width: 480px) 100vw, (max-width: 768px) 50vw, 1200px"
        )

    def test_default_sizes_attr_single_width(self):
        assert default_sizes_attr([640]) == (
            "(max-width: 640px) 100vw, (max-width: 640px) 50vw, 640px"
        )

    def test_sizes_generated_from_resolved_widths(self):
        config = resolve_config(RawRequestParams(widths="1000,500"))
        assert config.sizes_attr == (
            "(max-width: 500px) 100vw, (max-width: 1000px) 50vw, 1000px"
        )

    def test_explicit_sizes_kept(self):
        config = resolve_config(RawRequestParams(sizes="100vw"))
        assert config.sizes_attr == "100vw"


class TestStrictMode:
    """Tests for the opt-in strict validation mode."""

    def test_strict_accepts_valid_input(self):
        config = resolve_config(
            RawRequestParams(widths="480,960", formats="webp,avif", quality_webp="90"),
            strict=True,
        )
        assert config.widths == [480, 960]

    @pytest.mark.parametrize(
        "params",
        [
            RawRequestParams(widths="480,abc"),
            RawRequestParams(formats="webp,gif"),
            RawRequestParams(quality_webp="500"),
            RawRequestParams(quality_avif="best"),
        ],
    )
    def test_strict_rejects_malformed_input(self, params):
        with pytest.raises(ConfigurationError):
            resolve_config(params, strict=True)

    def test_lenient_mode_never_raises(self):
        config = resolve_config(
            RawRequestParams(widths="x", formats="y", quality_webp="z", quality_avif="0")
        )
        assert config.widths == [480, 768, 1200]
        assert config.quality_avif == 1


class TestEnvironmentSettings:
    """Tests for environment-driven defaults and limits."""

    def test_resolver_defaults_from_env(self):
        env = {
            "WEBREADY_DEFAULT_WIDTHS": "320,640",
            "WEBREADY_DEFAULT_FORMATS": "avif",
            "WEBREADY_QUALITY_WEBP": "70",
            "WEBREADY_QUALITY_AVIF": "40",
        }
        with patch.dict(os.environ, env):
            defaults = load_resolver_defaults()
        assert defaults.breakpoints == [320, 640]
        assert defaults.formats == ["avif"]
        assert defaults.quality_webp == 70
        assert defaults.quality_avif == 40

    def test_service_settings_from_env(self):
        env = {
            "WEBREADY_MAX_FILE_SIZE": "1024",
            "WEBREADY_MAX_FILES": "3",
            "WEBREADY_PROCESSOR": "multithread",
        }
        with patch.dict(os.environ, env):
            settings = ServiceSettings.from_env()
        assert settings.max_file_size == 1024
        assert settings.max_files == 3
        assert settings.processor == "multithread"

    def test_service_settings_ignore_invalid_env(self):
        with patch.dict(os.environ, {"WEBREADY_MAX_FILES": "lots"}):
            settings = ServiceSettings.from_env()
        assert settings.max_files == 50
