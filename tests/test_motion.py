import dataclasses
import math

import pytest
import torch

from metablobs.config import ROTATION_SPEED_A, ROTATION_SPEED_B
from metablobs.motion import AnimationState, blob_positions, rotate


def test_positions_at_rest():
    blobs = blob_positions(AnimationState())
    expected = torch.tensor([
        [1.5, 0.0, 0.0],
        [0.155622, -0.136840, 2.407709],
        [-2.205060, 1.103635, -0.824440],
    ])
    assert blobs.shape == (3, 3)
    assert torch.allclose(blobs, expected, atol=1e-4)


@pytest.mark.parametrize("a,b", [(0.3, 1.7), (4.2, -0.5), (12.0, 30.0)])
def test_rotations_keep_distance_from_origin(a, b):
    blobs = blob_positions(AnimationState(a, b))
    z0 = (0.8 * math.sin(b * 3.1), 1.0 * math.cos(b * 2.3), 0.6 * math.sin(b * -1.8))
    for blob, radius, z in zip(blobs, (1.5, 2.2, 2.6), z0):
        assert abs(torch.norm(blob).item() - math.hypot(radius, z)) < 1e-4


def test_rotate_quarter_turn():
    a, b = rotate(torch.tensor(1.0), torch.tensor(0.0), torch.tensor(math.pi / 2))
    assert abs(a.item()) < 1e-6 and abs(b.item() - 1.0) < 1e-6


def test_advance():
    s = AnimationState().advance()
    assert math.isclose(s.angle_a, ROTATION_SPEED_A, rel_tol=1e-6)
    assert math.isclose(s.angle_b, ROTATION_SPEED_B, rel_tol=1e-6)
    s = s.advance().advance()
    assert math.isclose(s.angle_a, 3 * ROTATION_SPEED_A, rel_tol=1e-5)


def test_state_is_immutable():
    s = AnimationState()
    with pytest.raises(dataclasses.FrozenInstanceError):
        s.angle_a = 1.0
