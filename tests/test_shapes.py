import pytest
import torch

from tinyconv.utils.shapes import (
    InvalidConfigError,
    Shape3D,
    ShapeMismatchError,
    check_tensor3d,
    check_vector,
    conv_output_size,
    pad2d,
)


@pytest.mark.parametrize(
    "input_size, kernel_size, stride, padding, expected",
    [
        (28, 3, 1, 1, 28),
        (28, 2, 2, 0, 14),
        (7, 2, 2, 0, 3),
        (5, 3, 2, 1, 3),
        (10, 4, 3, 0, 3),
        (3, 3, 1, 0, 1),
        (1, 3, 1, 1, 1),
    ],
)
def test_conv_output_size_matches_formula(input_size, kernel_size, stride, padding, expected):
    assert conv_output_size(input_size, kernel_size, stride, padding) == expected
    assert expected == (input_size + 2 * padding - kernel_size) // stride + 1


def test_conv_output_size_kernel_equals_input():
    for size in range(1, 8):
        assert conv_output_size(size, size, 1, 0) == 1


@pytest.mark.parametrize(
    "input_size, kernel_size, stride, padding",
    [
        (4, 3, 0, 0),
        (4, 3, -1, 0),
        (4, 0, 1, 0),
        (4, 3, 1, -1),
        (2, 3, 1, 0),
        (1, 2, 2, 0),
    ],
)
def test_conv_output_size_rejects_invalid_config(input_size, kernel_size, stride, padding):
    with pytest.raises(InvalidConfigError):
        conv_output_size(input_size, kernel_size, stride, padding)


def test_pad2d_zero_is_noop():
    grid = torch.rand(5, 6)
    padded = pad2d(grid, 0)
    assert torch.equal(padded, grid)


def test_pad2d_adds_zero_border_and_keeps_interior():
    grid = torch.arange(1.0, 13.0).reshape(3, 4)
    p = 2
    padded = pad2d(grid, p)

    assert padded.shape == (3 + 2 * p, 4 + 2 * p)
    assert torch.equal(padded[p:p + 3, p:p + 4], grid)
    border = torch.ones_like(padded, dtype=torch.bool)
    border[p:p + 3, p:p + 4] = False
    assert torch.all(padded[border] == 0)


def test_pad2d_pads_each_channel():
    x = torch.rand(3, 4, 4) + 1.0
    padded = pad2d(x, 1)

    assert padded.shape == (3, 6, 6)
    for c in range(3):
        assert torch.equal(padded[c, 1:5, 1:5], x[c])
        assert torch.all(padded[c, 0, :] == 0)
        assert torch.all(padded[c, :, -1] == 0)


def test_pad2d_does_not_modify_input():
    grid = torch.ones(2, 2)
    pad2d(grid, 1)
    assert torch.equal(grid, torch.ones(2, 2))


def test_pad2d_rejects_negative_padding():
    with pytest.raises(InvalidConfigError):
        pad2d(torch.zeros(2, 2), -1)


def test_shape3d():
    shape = Shape3D(5, 7, 7)
    assert shape.numel == 245
    assert str(shape) == "5 channels 7x7"


def test_check_tensor3d():
    assert check_tensor3d(torch.zeros(2, 3, 4)) == Shape3D(2, 3, 4)
    with pytest.raises(ShapeMismatchError):
        check_tensor3d(torch.zeros(3, 4))
    with pytest.raises(ShapeMismatchError):
        check_tensor3d(None)
    with pytest.raises(ShapeMismatchError):
        check_tensor3d(torch.zeros(1, 0, 4))
    with pytest.raises(ShapeMismatchError, match="expected 1 input channels, got 2"):
        check_tensor3d(torch.zeros(2, 3, 3), expected_channels=1)


def test_check_vector():
    assert check_vector(torch.zeros(4)) == 4
    with pytest.raises(ShapeMismatchError):
        check_vector(torch.zeros(2, 2))
    with pytest.raises(ShapeMismatchError, match="length 3, got 4"):
        check_vector(torch.zeros(4), expected_length=3)
