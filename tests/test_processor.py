import io

import pytest
from PIL import Image

from image_resizer.exceptions import ImageDecodeError, ImageEncodeError
from image_resizer.resize.constants import FitMode
from image_resizer.resize.processor import (
    JPEG_ENCODER,
    ImageProcessor,
    OutputEncoder,
    contain_size,
    cover_size,
    encoder_for,
    resize_image,
)

from tests.images import encode_image


def _open(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


SOURCE_SIZES = [(640, 480), (480, 640), (300, 300), (1000, 10), (10, 1000), (7, 3)]
TARGETS = [(100, 100), (200, 50), (50, 200), (640, 480), (1, 1)]


# ── Geometry ─────────────────────────────────────────────────────────────────

def test_cover_size_wide_source_overflows_width() -> None:
    assert cover_size(400, 200, 100, 100) == (200, 100)


def test_cover_size_tall_source_overflows_height() -> None:
    assert cover_size(200, 400, 100, 100) == (100, 200)


def test_cover_size_never_below_target() -> None:
    for w, h in SOURCE_SIZES:
        for tw, th in TARGETS:
            sw, sh = cover_size(w, h, tw, th)
            assert sw >= tw and sh >= th


def test_contain_size_wide_and_tall() -> None:
    assert contain_size(400, 200, 100, 100) == (100, 50)
    assert contain_size(200, 400, 100, 100) == (50, 100)


def test_contain_size_upscales_small_images() -> None:
    assert contain_size(10, 5, 100, 100) == (100, 50)


def test_contain_size_has_one_pixel_floor() -> None:
    assert contain_size(1000, 1, 10, 10) == (10, 1)


# ── Policies ─────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(("w", "h"), SOURCE_SIZES)
@pytest.mark.parametrize(("tw", "th"), TARGETS)
def test_cover_output_is_exact_target(w: int, h: int, tw: int, th: int) -> None:
    data, content_type = resize_image(encode_image(w, h), tw, th, FitMode.COVER)
    assert content_type == "image/jpeg"
    assert _open(data).size == (tw, th)


@pytest.mark.parametrize(("w", "h"), SOURCE_SIZES)
@pytest.mark.parametrize(("tw", "th"), TARGETS)
def test_fill_output_is_exact_target(w: int, h: int, tw: int, th: int) -> None:
    data, _ = resize_image(encode_image(w, h), tw, th, FitMode.FILL)
    assert _open(data).size == (tw, th)


@pytest.mark.parametrize(("w", "h"), SOURCE_SIZES)
@pytest.mark.parametrize(("tw", "th"), TARGETS)
def test_contain_fits_box_and_keeps_aspect(w: int, h: int, tw: int, th: int) -> None:
    data, _ = resize_image(encode_image(w, h), tw, th, FitMode.CONTAIN)
    ow, oh = _open(data).size
    assert ow <= tw and oh <= th
    # One side touches the box
    assert ow == tw or oh == th
    # Aspect within rounding: one pixel on either side
    assert abs(ow - oh * w / h) <= 1 + w / h


def test_cover_crops_center() -> None:
    # Left third red, middle third green, right third blue
    source = Image.new("RGB", (300, 100), (255, 0, 0))
    source.paste((0, 255, 0), (100, 0, 200, 100))
    source.paste((0, 0, 255), (200, 0, 300, 100))
    buf = io.BytesIO()
    source.save(buf, format="PNG")

    data, _ = resize_image(buf.getvalue(), 100, 100, FitMode.COVER)
    r, g, b = _open(data).convert("RGB").getpixel((50, 50))
    assert g > 200 and r < 60 and b < 60


def test_scale_down_returns_small_image_byte_for_byte() -> None:
    original = encode_image(80, 60)
    data, content_type = resize_image(original, 100, 100, FitMode.SCALE_DOWN)
    assert data == original
    assert content_type == "image/png"


def test_scale_down_at_exact_box_is_untouched() -> None:
    original = encode_image(100, 100, fmt="JPEG")
    data, content_type = resize_image(original, 100, 100, FitMode.SCALE_DOWN)
    assert data == original
    assert content_type == "image/jpeg"


@pytest.mark.parametrize(("w", "h"), [(400, 200), (200, 400), (150, 90), (90, 150)])
def test_scale_down_matches_contain_when_too_large(w: int, h: int) -> None:
    source = encode_image(w, h)
    scaled, _ = resize_image(source, 100, 100, FitMode.SCALE_DOWN)
    contained, _ = resize_image(source, 100, 100, FitMode.CONTAIN)
    assert scaled == contained


def test_scale_down_one_axis_over_box_still_shrinks() -> None:
    data, _ = resize_image(encode_image(120, 50), 100, 100, FitMode.SCALE_DOWN)
    assert _open(data).size == (100, 42)


def test_processor_resize_scale_down_returns_copy_when_fitting() -> None:
    processor = ImageProcessor(encode_image(20, 10))
    assert processor.resize(100, 100, FitMode.SCALE_DOWN).size == (20, 10)


# ── Determinism / encoding ───────────────────────────────────────────────────

@pytest.mark.parametrize("mode", list(FitMode))
def test_resize_is_deterministic(mode: FitMode) -> None:
    source = encode_image(333, 222)
    first = resize_image(source, 120, 80, mode)
    second = resize_image(source, 120, 80, mode)
    assert first == second


def test_any_input_format_is_reencoded_as_jpeg() -> None:
    for fmt in ("PNG", "GIF", "BMP", "WEBP"):
        data, content_type = resize_image(encode_image(64, 64, fmt=fmt), 32, 32, FitMode.FILL)
        assert content_type == "image/jpeg"
        assert _open(data).format == "JPEG"


def test_rgba_source_is_flattened_onto_white_for_jpeg() -> None:
    source = encode_image(50, 50, mode="RGBA", color=(0, 0, 0, 0))
    data, _ = resize_image(source, 20, 20, FitMode.FILL)
    image = _open(data)
    assert image.mode == "RGB"
    r, g, b = image.getpixel((10, 10))
    assert min(r, g, b) > 240


def test_palette_and_grayscale_sources_are_supported() -> None:
    for mode, color in (("P", 3), ("L", 128), ("1", 1), ("LA", (128, 255))):
        data, _ = resize_image(encode_image(40, 30, mode=mode, color=color), 20, 20, FitMode.COVER)
        assert _open(data).size == (20, 20)


def test_png_encoder_keeps_alpha() -> None:
    source = encode_image(50, 50, mode="RGBA", color=(10, 20, 30, 40))
    data, content_type = resize_image(source, 10, 10, FitMode.FILL, encoder_for("png"))
    image = _open(data)
    assert content_type == "image/png"
    assert image.format == "PNG"
    assert image.mode == "RGBA"


def test_encoder_for_known_formats() -> None:
    assert encoder_for("jpg") == JPEG_ENCODER
    assert encoder_for("WEBP", 90).content_type == "image/webp"
    assert encoder_for("webp", 90).quality == 90


def test_encoder_for_unknown_format() -> None:
    with pytest.raises(ValueError):
        encoder_for("tiff")


def test_encoder_failure_raises_encode_error() -> None:
    broken = OutputEncoder(format="NOPE", content_type="image/nope")
    with pytest.raises(ImageEncodeError) as exc_info:
        broken.encode(Image.new("RGB", (4, 4)))
    assert exc_info.value.code == "encode_error"


# ── Decoding ─────────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "data",
    [b"", b"not an image at all", encode_image(10, 10)[:40]],
)
def test_malformed_input_raises_decode_error(data: bytes) -> None:
    with pytest.raises(ImageDecodeError) as exc_info:
        resize_image(data, 10, 10, FitMode.COVER)
    assert exc_info.value.status_code == 422


def test_mpo_source_is_reported_as_jpeg() -> None:
    processor = ImageProcessor(encode_image(10, 10, fmt="JPEG"))
    processor.source_format = "MPO"
    assert processor.source_content_type == "image/jpeg"
