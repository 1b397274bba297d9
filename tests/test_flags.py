from __future__ import annotations

import pytest

from web_optimizer.assets import AssetBucket
from web_optimizer.constants import DEVICE_SIZES
from web_optimizer.errors import FlagValidationError
from web_optimizer.flags import (
    ImageOptions,
    parse_format,
    parse_quality,
    parse_sizes,
    resolve_flags,
)

IMAGES = AssetBucket(image=("a.png",))
EVERYTHING = AssetBucket(image=("a.png",), svg=("b.svg",), video=("c.mp4",))


def test_image_defaults_are_applied_and_announced(log, log_stream) -> None:
    flags = resolve_flags({}, IMAGES, log)

    assert flags.ok
    assert flags.image == ImageOptions(
        quality=75, descriptor="w", sizes=DEVICE_SIZES, format="png", output=None, backup=True
    )
    output = log_stream.getvalue()
    # Every defaulted field is reported, not only the first one
    assert "No quality flag set" in output
    assert "No descriptor flag set" in output
    assert "No sizes flag set" in output
    assert "No format flag set" in output
    assert "No output directory specified" in output


def test_all_invalid_fields_are_reported_together(log) -> None:
    raw = {"quality": "150", "descriptor": "z", "sizes": ["640", "abc"], "format": "gif"}

    flags = resolve_flags(raw, IMAGES, log)

    assert not flags.ok
    assert sorted(e.flag for e in flags.errors) == ["descriptor", "format", "quality", "sizes"]


def test_explicit_values_are_used(log) -> None:
    raw = {
        "quality": "40",
        "descriptor": "x",
        "sizes": ["320", "480"],
        "format": "webp",
        "output": "dist",
        "backup": False,
    }

    flags = resolve_flags(raw, IMAGES, log)

    assert flags.ok
    assert flags.image == ImageOptions(
        quality=40, descriptor="x", sizes=(320, 480), format="webp", output="dist", backup=False
    )


@pytest.mark.parametrize("value, expected", [("0", 0), ("100", 100), (" 75 ", 75), (50, 50)])
def test_quality_accepts_range_bounds(value, expected: int) -> None:
    assert parse_quality(value) == expected


@pytest.mark.parametrize("value", ["-1", "101", "abc", "7.5", True])
def test_quality_rejects_out_of_range_and_non_integers(value) -> None:
    with pytest.raises(FlagValidationError) as excinfo:
        parse_quality(value)
    assert excinfo.value.flag == "quality"


def test_out_of_range_quality_is_not_clamped(log) -> None:
    flags = resolve_flags({"quality": "250"}, IMAGES, log)

    assert [e.flag for e in flags.errors] == ["quality"]
    assert "between 0 and 100" in str(flags.errors[0])


@pytest.mark.parametrize("value", ["jpg", "JPEG", ".jpg", "jpeg"])
def test_jpg_is_normalized_to_jpeg(value: str) -> None:
    assert parse_format(value) == "jpeg"


def test_sizes_accept_strings_and_lists() -> None:
    assert parse_sizes("640 750,828") == (640, 750, 828)
    assert parse_sizes(["1080", "640 1080"]) == (1080, 640)


@pytest.mark.parametrize("value", [["0"], ["-640"], ["wide"], [""], []])
def test_sizes_reject_non_positive_or_non_numeric(value) -> None:
    with pytest.raises(FlagValidationError):
        parse_sizes(value)


def test_only_present_asset_types_get_options(log) -> None:
    flags = resolve_flags({"jsx": True}, AssetBucket(svg=("b.svg",)), log)

    assert flags.image is None
    assert flags.video is None
    assert flags.svg is not None
    assert flags.svg.jsx is True


def test_image_flags_are_not_validated_without_images(log) -> None:
    flags = resolve_flags({"quality": "900"}, AssetBucket(svg=("b.svg",)), log)

    assert flags.ok


def test_video_crf_default_and_range(log) -> None:
    flags = resolve_flags({}, EVERYTHING, log)
    assert flags.video.crf == 23

    flags = resolve_flags({"crf": "99"}, EVERYTHING, log)
    assert [e.flag for e in flags.errors] == ["crf"]


def test_output_is_shared_by_every_option_set(log) -> None:
    flags = resolve_flags({"output": "out"}, EVERYTHING, log)

    assert flags.image.output == flags.svg.output == flags.video.output == "out"
