from collections import Counter

import numpy as np
import pytest

from cubes import (
	Axis,
	Color,
	Direction,
	GeometryInvariantViolation,
	Rubik_3x3x3,
	Turn,
	invertTurn,
	normalizeDegrees,
)


@pytest.fixture
def cube():
	return Rubik_3x3x3()


def test_new_cube_is_solved(cube):
	assert cube.isSolved()
	assert cube.getScore() == 1.0


def test_piece_classes(cube):
	counts = Counter(len(p.getFaces()) for p in cube.getPieces())
	assert counts == { 0: 1, 1: 6, 2: 12, 3: 8 }
	assert sum(p.isCorner() for p in cube.getPieces()) == 8
	assert sum(p.isEdge() for p in cube.getPieces()) == 12
	assert sum(p.isCenter() for p in cube.getPieces()) == 6
	assert sum(p.isInterior() for p in cube.getPieces()) == 1


def test_scramble_keeps_colors_and_positions(cube):
	pieceColors = [set(p.getFaces().values()) for p in cube.getPieces()]
	cube.scramble(50, seed=3)
	assert [set(p.getFaces().values()) for p in cube.getPieces()] == pieceColors

	colors = Counter(color for _, color in cube.getFacelets())
	assert colors == { color: 9 for color in Color if color != Color.neutral }

	positions = { p.getPosition() for p in cube.getPieces() }
	assert len(positions) == 27
	for piece in cube.getPieces():
		assert cube.getPiece(piece.getPosition()) is piece


@pytest.mark.parametrize("axis", list(Axis))
@pytest.mark.parametrize("coordinate", [-1, 0, 1])
@pytest.mark.parametrize("degrees", [90, 180, -90])
def test_turn_then_inverse_restores(cube, axis, coordinate, degrees):
	cube.scramble(10, seed=1)
	before = cube.getState()
	turn = Turn(axis, coordinate, degrees)
	cube.turn(turn)
	assert cube.getState() != before
	cube.turn(invertTurn(turn))
	assert cube.getState() == before


def test_four_quarter_turns_are_identity(cube):
	before = cube.getState()
	for i in range(4):
		cube.rotate(cube.slice(Direction.right), 90)
	assert cube.getState() == before


def test_right_face_turn_moves_stickers(cube):
	# a clockwise R turn takes the up-front-right corner to up-back-right
	corner = cube.getPiece((1, 1, 1))
	cube.turn(Turn(Axis.x, 1, -90))
	assert corner.getPosition() == (1, 1, -1)
	assert cube.getPiece((1, 1, -1)) is corner
	faces = corner.getFaces()
	assert faces[Direction.back] == Color.white
	assert faces[Direction.up] == Color.green
	assert faces[Direction.right] == Color.orange


def test_non_quarter_turns_are_rejected(cube):
	with pytest.raises(ValueError):
		cube.rotate(cube.slice(Direction.up), 45)
	with pytest.raises(ValueError):
		normalizeDegrees(30)


def test_normalize_degrees():
	assert normalizeDegrees(0) == 0
	assert normalizeDegrees(270) == -90
	assert normalizeDegrees(-180) == 180
	assert normalizeDegrees(450) == 90


def test_bad_slice_coordinate(cube):
	with pytest.raises(ValueError):
		cube.slice(Axis.x, 2)


def test_get_piece_outside_grid(cube):
	with pytest.raises(GeometryInvariantViolation):
		cube.getPiece((2, 0, 0))


def test_slice_members(cube):
	top = cube.slice(Direction.up)
	assert len(top.getMembers()) == 9
	assert len(top.getEdges()) == 4
	assert len(top.getCorners()) == 4
	assert top.getCenter().getPosition() == (0, 1, 0)
	assert top.getCenterFaceColor() == Color.white
	assert all(top.contains(p) for p in top.getMembers())

	front = cube.slice(Direction.forward)
	assert len(top.getOverlap(front.getMembers())) == 3


def test_middle_slice_has_no_single_center(cube):
	with pytest.raises(GeometryInvariantViolation):
		cube.slice(Axis.x, 0).getCenter()


def test_slice_direction(cube):
	assert cube.slice(Direction.left).getDirection() == Direction.left
	assert cube.slice(Axis.y, 0).getDirection() == Direction.up
	assert cube.slice(Axis.z, -1).getDirection() == Direction.back


def test_slice_equality(cube):
	assert cube.slice(Direction.down) == cube.slice(Axis.y, -1)
	assert len({ cube.slice(Direction.down), cube.slice(Axis.y, -1), cube.slice(Axis.y, 0) }) == 2
	piece = cube.getPiece((1, 0, -1))
	assert set(piece.getSlices()) == {
		cube.slice(Axis.x, 1), cube.slice(Axis.y, 0), cube.slice(Axis.z, -1) }


def test_rotation_degrees_between_directions(cube):
	top = cube.slice(Direction.up)
	assert top.getRotationDegrees(Direction.forward, Direction.forward) == 0
	assert top.getRotationDegrees(Direction.forward, Direction.right) == 90
	assert top.getRotationDegrees(Direction.forward, Direction.back) == 180
	assert top.getRotationDegrees(Direction.forward, Direction.left) == -90


def test_rotation_degrees_between_pieces(cube):
	top = cube.slice(Direction.up)
	source = cube.getPiece((1, 1, 1))
	target = cube.getPiece((-1, 1, -1))
	assert top.getRotationDegrees(source, target) == 180

	# an edge can never be turned onto a corner
	with pytest.raises(GeometryInvariantViolation):
		top.getRotationDegrees(cube.getPiece((0, 1, 1)), source)
	# directions along the slice axis do not lie in the slice
	with pytest.raises(GeometryInvariantViolation):
		top.getRotationDegrees(Direction.up, Direction.forward)


def test_rotation_degrees_does_not_move_pieces(cube):
	before = cube.getState()
	cube.slice(Direction.forward).getRotationDegrees(Direction.up, Direction.left)
	assert cube.getState() == before


def test_piece_color_queries(cube):
	corner = cube.getPiece((-1, -1, 1))
	assert corner.hasColor(Color.red)
	assert not corner.hasColor(Color.white)
	assert corner.getDirectionOf(Color.yellow) == Direction.down
	assert corner.getDirectionOf(Color.white) is None
	assert corner.getColor(Direction.up) == Color.neutral
	assert set(corner.getSideDirections()) == { Direction.forward, Direction.left }


def test_remember_and_restore_state(cube):
	solved = cube.getState()
	cube.rememberState()
	cube.scramble(20, seed=5)
	assert not cube.isSolved()
	cube.restoreState()
	assert cube.getState() == solved


def test_custom_face_colors():
	faceColors = dict(Rubik_3x3x3.defaultFaceColors)
	faceColors[Direction.up], faceColors[Direction.down] = Color.yellow, Color.white
	cube = Rubik_3x3x3(faceColors=faceColors)
	assert cube.slice(Direction.down).getCenterFaceColor() == Color.white
	assert cube.isSolved()

	with pytest.raises(ValueError):
		Rubik_3x3x3(faceColors={ Direction.up: Color.white })


def test_direction_helpers():
	assert -Direction.up == Direction.down
	assert Direction.back.axis == Axis.z
	assert Direction.back.sign == -1
	assert Direction.fromVector(np.array([0.2, -0.9, 0.1])) == Direction.down
	assert Axis.x.direction == Direction.right
	with pytest.raises(GeometryInvariantViolation):
		Direction.fromVector([0, 0, 0])


def test_face_slice_takes_no_coordinate(cube):
	with pytest.raises(ValueError):
		cube.slice(Direction.up, 1)
