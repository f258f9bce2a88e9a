import torch

from metablobs import config
from metablobs.config import NO_HIT, RenderConfig
from metablobs.field import field
from metablobs.marcher import march, march_rays

BLOB = torch.zeros(1, 3)
FORWARD = (0., 0., 1.)


def test_marching_constants():
    assert config.MAX_STEPS == 64
    assert config.MAX_DISTANCE == 20.0
    assert config.MIN_DISTANCE == 0.01
    assert config.THRESHOLD == 1.0
    assert config.EPSILON == 0.001
    assert config.STEP_SCALE == 0.1
    assert config.FIELD_GUARD == 1e-4


def test_hit_lands_on_the_surface():
    hit = march((0., 0., -5.), FORWARD, BLOB)
    assert hit is not None
    assert field(hit.point.unsqueeze(0), BLOB).item() >= config.THRESHOLD - 1e-5
    # one step near the surface is at most 0.1 / 1.1
    assert -1.2 - 1e-4 <= hit.point[2].item() <= -1.1
    assert abs(hit.distance - (hit.point[2].item() + 5.0)) < 1e-4


def test_out_of_range_is_no_hit():
    assert march((0., 0., -30.), FORWARD, BLOB) is None


def test_ray_pointing_away_is_no_hit():
    assert march((0., 0., -5.), (0., 0., -1.), BLOB) is None


def test_step_budget_exhausted_is_no_hit():
    assert march((0., 0., -5.), FORWARD, BLOB, RenderConfig(max_steps=3)) is None


def test_batch_matches_single_rays():
    origins = torch.tensor([[0., 0., -5.], [0., 0., -30.], [0.5, 0.2, -6.], [0., 0., -5.]])
    dirs = torch.tensor([[0., 0., 1.], [0., 0., 1.], [0., 0., 1.], [1., 0., 0.]])
    result = march_rays(origins, dirs, BLOB)

    for i in range(len(origins)):
        single = march(origins[i], dirs[i], BLOB)
        assert bool(result.hit[i]) == (single is not None)
        if single is None:
            assert result.distance[i].item() == NO_HIT
        else:
            assert abs(result.distance[i].item() - single.distance) < 1e-5
            assert torch.allclose(result.position[i], single.point, atol=1e-5)

    assert (result.steps <= config.MAX_STEPS).all()
    assert (result.steps >= 1).all()


def test_finished_rays_stop_advancing():
    origins = torch.tensor([[0., 0., -2.], [0., 0., -12.]])
    dirs = torch.tensor([[0., 0., 1.], [0., 0., 1.]])
    result = march_rays(origins, dirs, BLOB)
    assert result.hit.all()
    assert result.steps[0] < result.steps[1]
