import numpy as np
import pytest

from iconmaker.icons.colors import adjust_brightness, parse_hex
from iconmaker.icons.glyphs import GLYPH_RULES
from iconmaker.icons.models import IconSpec
from iconmaker.icons.raster import WORKING_SIZE
from iconmaker.icons.renderer import NOISE_AMPLITUDE, radial_background, render_icon

BG = "#336699"
FG = "#ffcc00"


def _spec(description: str, size: int = 64) -> IconSpec:
    return IconSpec(description=description, background_color=BG, foreground_color=FG, size=size)


def _rgb(raster, x: int, y: int) -> tuple[int, int, int]:
    return tuple(int(c) for c in raster.pixels[y, x, :3])


def test_render_is_deterministic():
    a = render_icon(_spec("gear settings"))
    b = render_icon(_spec("gear settings"))
    assert a.same_pixels(b)


@pytest.mark.parametrize("size", [16, 256, 1024])
def test_output_is_working_size_and_opaque(size):
    raster = render_icon(_spec("star", size=size))
    assert raster.size == WORKING_SIZE
    assert raster.pixels.shape == (WORKING_SIZE, WORKING_SIZE, 4)
    assert (raster.pixels[..., 3] == 255).all()


def test_default_geometric_layers():
    raster = render_icon(_spec("xyz nonsense"))
    assert _rgb(raster, 256, 256) == parse_hex(BG)
    assert _rgb(raster, 195, 256) == parse_hex(adjust_brightness(FG, 40))
    assert _rgb(raster, 160, 256) == parse_hex(FG)


def test_circle_glyph_for_round_description():
    raster = render_icon(_spec("round star icon"))
    assert _rgb(raster, 256, 256) == parse_hex(FG)
    # the inner ring is cut out in the background color
    assert _rgb(raster, 256, 136) == parse_hex(BG)


def test_corners_show_darkened_background():
    raster = render_icon(_spec("heart"))
    edge = parse_hex(adjust_brightness(BG, -30))
    for x, y in [(0, 0), (511, 0), (0, 511), (511, 511)]:
        assert _rgb(raster, x, y) == edge


def test_radial_background_runs_from_color_to_darker_edge():
    rgb = radial_background("#6366f1")
    assert tuple(int(c) for c in rgb[256, 256]) == parse_hex("#6366f1")
    assert tuple(int(c) for c in rgb[0, 0]) == parse_hex(adjust_brightness("#6366f1", -30))


def test_drop_shadow_darkens_below_glyph():
    raster = render_icon(_spec("xyz nonsense"))
    plain = radial_background(BG)
    # geometric glyph ends at y=362; shadow is offset downward
    shaded = raster.pixels[368, 256, :3].astype(int).sum()
    assert shaded < plain[368, 256].astype(int).sum()


@pytest.mark.parametrize("rule", GLYPH_RULES, ids=lambda r: r.name)
def test_every_glyph_paints_the_foreground_color(rule):
    raster = render_icon(_spec(rule.keywords[0]))
    fg = np.array(parse_hex(FG), dtype=np.uint8)
    assert (raster.pixels[..., :3] == fg).all(axis=-1).any()


def test_different_glyphs_differ():
    star = render_icon(_spec("star"))
    heart = render_icon(_spec("heart"))
    assert not star.same_pixels(heart)


def test_noise_is_seeded_and_bounded():
    clean = render_icon(_spec("lock"))
    a = render_icon(_spec("lock"), noise_seed=7)
    b = render_icon(_spec("lock"), noise_seed=7)
    assert a.same_pixels(b)
    assert not a.same_pixels(clean)
    corner_diff = np.abs(a.pixels[:40, :40, :3].astype(int) - clean.pixels[:40, :40, :3].astype(int))
    assert corner_diff.max() <= NOISE_AMPLITUDE
