import pytest
import torch

from metablobs.camera import EYE, Viewport, camera_rays, ray_for_cell


def test_fit_base_size():
    vp = Viewport.fit(80, 22)
    assert (vp.k1_x, vp.k1_y, vp.y_center) == (90.0, 45.0, 12)


def test_fit_keeps_aspect():
    wide = Viewport.fit(160, 22)
    assert (wide.k1_x, wide.k1_y) == (90.0, 45.0)
    big = Viewport.fit(160, 44)
    assert (big.k1_x, big.k1_y, big.y_center) == (180.0, 90.0, 24)


@pytest.mark.parametrize("w,h", [(0, 10), (10, 0), (-1, 5)])
def test_fit_rejects_empty(w, h):
    with pytest.raises(ValueError):
        Viewport.fit(w, h)


def test_centre_cell_looks_forward():
    d = ray_for_cell(40, 12, Viewport.fit(80, 22))
    assert torch.allclose(d, torch.tensor([0., 0., 1.]))


def test_ray_for_cell_is_unit_and_oriented():
    vp = Viewport.fit(80, 22)
    top_left = ray_for_cell(0, 0, vp)
    bottom_right = ray_for_cell(79, 21, vp)
    assert abs(torch.norm(top_left).item() - 1.0) < 1e-6
    assert top_left[0] < 0 and top_left[1] > 0
    assert bottom_right[0] > 0 and bottom_right[1] < 0
    assert top_left[2] > 0


def test_camera_rays_are_row_major():
    vp = Viewport.fit(80, 22)
    origins, dirs = camera_rays(vp)
    assert origins.shape == (80 * 22, 3) and dirs.shape == (80 * 22, 3)
    assert torch.equal(origins, torch.tensor(EYE).expand(80 * 22, 3))
    for x, y in [(0, 0), (79, 0), (3, 17), (40, 12), (79, 21)]:
        assert torch.allclose(dirs[y * vp.width + x], ray_for_cell(x, y, vp), atol=1e-6)
