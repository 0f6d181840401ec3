from collections import namedtuple
from enum import Enum

import numpy as np



# error taxonomy; none of these is meant to be caught and retried, they all mean
# that a query met a cube which cannot exist

class GeometryInvariantViolation(RuntimeError):
	"""
	A geometric query found zero or several matches where exactly one was expected
	"""

class PreconditionViolation(GeometryInvariantViolation):
	"""
	A query was asked of a piece of the wrong class (e.g. corner directions of an edge)
	"""

class InvalidStageDispatch(ValueError):
	pass



## Shared types ####################################################################################


class Axis(Enum):
	x = 0
	y = 1
	z = 2

	@property
	def direction(self):
		"""
		The positive unit direction along this axis
		"""
		return Direction.fromVector(np.eye(3, dtype=int)[self.value])


class Direction(Enum):
	"""
	One of the six axis-aligned unit vectors, used both for piece-local faces and world space
	"""
	right   = ( 1,  0,  0)
	left    = (-1,  0,  0)
	up      = ( 0,  1,  0)
	down    = ( 0, -1,  0)
	forward = ( 0,  0,  1)
	back    = ( 0,  0, -1)

	@property
	def vector(self):
		return np.array(self.value, dtype=int)

	@property
	def axis(self):
		return Axis(int(np.flatnonzero(self.vector)[0]))

	@property
	def sign(self):
		return sum(self.value)

	def __neg__(self):
		return Direction(tuple(-c for c in self.value))

	@staticmethod
	def fromVector(vector):
		"""
		Rounds `vector` to the nearest axis direction
		"""
		vector = np.asarray(vector, dtype=float)
		index = int(np.argmax(np.abs(vector)))
		if vector[index] == 0:
			raise GeometryInvariantViolation(f"Zero vector has no direction: {vector}")
		unit = [0, 0, 0]
		unit[index] = 1 if vector[index] > 0 else -1
		return Direction(tuple(unit))


Color = Enum("Color", ["neutral", "blue", "green", "orange", "red", "white", "yellow"])


# a rotation command: rotate the slice (axis, coordinate) by `degrees` about the positive axis
# (right-hand rule); degrees are a multiple of 90 in [-180, 180]
Turn = namedtuple("Turn", ["axis", "coordinate", "degrees"])


def normalizeDegrees(degrees):
	"""
	Maps any multiple of 90 to one of 0, 90, 180, -90
	"""
	if degrees % 90 != 0:
		raise ValueError(f"Not a quarter-turn multiple: {degrees}")
	degrees %= 360
	return -90 if degrees == 270 else degrees

def invertTurn(turn):
	return Turn(turn.axis, turn.coordinate, normalizeDegrees(-turn.degrees))


_quarterCos = (1, 0, -1, 0)
_quarterSin = (0, 1, 0, -1)

def rotationMatrix(axis, degrees):
	"""
	Integer matrix of a rotation by a multiple of 90 degrees about a cardinal axis
	"""
	quarters = normalizeDegrees(degrees) // 90 % 4
	c, s = _quarterCos[quarters], _quarterSin[quarters]
	if axis == Axis.x:
		return np.array([[1, 0, 0], [0, c, -s], [0, s, c]], dtype=int)
	if axis == Axis.y:
		return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]], dtype=int)
	if axis == Axis.z:
		return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]], dtype=int)
	raise ValueError(f"Unknown axis: {axis}")



## Pieces ##########################################################################################


class Piece:
	"""
	One of the 27 unit sub-cubes. Colors are painted on local (body-frame) directions once,
	at construction; afterwards only the position and the accumulated rotation change.
	"""

	def __init__(self, cube, position, colors):
		self.cube = cube
		self._colors = { direction: color for direction, color in colors.items()
		                 if color != Color.neutral }
		self.position = tuple(int(c) for c in position)
		self.rotation = np.identity(3, dtype=int)


	def __repr__(self):
		colors = "/".join(c.name for c in self.getFaces().values())
		return f"{self.__class__.__name__}({self.position}, {colors or 'interior'})"


	## Coloring ####################################################################################

	def getColor(self, localDirection):
		return self._colors.get(localDirection, Color.neutral)

	def getLocalColors(self):
		return dict(self._colors)


	## Current state ###############################################################################

	def getPosition(self):
		return self.position

	def getFaces(self):
		"""
		Maps each world direction currently showing a painted face to its color
		"""
		faces = { Direction.fromVector(self.rotation @ direction.vector): color
		          for direction, color in self._colors.items() }
		assert len(faces) == len(self._colors), "Two painted faces point the same way"
		return faces

	def getDirectionOf(self, color):
		"""
		The world direction showing `color`, None if the piece does not carry it
		"""
		for direction, faceColor in self.getFaces().items():
			if faceColor == color:
				return direction
		return None

	def hasColor(self, color):
		return color in self._colors.values()

	def getSlices(self):
		return [self.cube.slice(axis, self.position[axis.value]) for axis in Axis]

	def getSideDirections(self):
		"""
		Horizontal world directions of the faces the piece's position touches
		"""
		return [d for d in (Direction.forward, Direction.back, Direction.left, Direction.right)
		        if self.position[d.axis.value] == d.sign]


	## Classification ##############################################################################

	def _countNonZero(self):
		return sum(1 for c in self.position if c != 0)

	def isInterior(self):
		return self._countNonZero() == 0

	def isCenter(self):
		return self._countNonZero() == 1

	def isEdge(self):
		return self._countNonZero() == 2

	def isCorner(self):
		return self._countNonZero() == 3



## Slices ##########################################################################################


class Slice:
	"""
	A view of the 9 pieces sharing one coordinate along one axis.
	Members are read from the cube on every query, so the view never goes stale.
	"""

	def __init__(self, cube, axis, coordinate):
		if coordinate not in (-1, 0, 1):
			raise ValueError(f"Slice coordinate must be -1, 0 or 1, not {coordinate}")
		self.cube = cube
		self.axis = axis
		self.coordinate = coordinate

	@staticmethod
	def fromDirection(cube, direction):
		return Slice(cube, direction.axis, direction.sign)


	def __eq__(self, other):
		return (isinstance(other, Slice)
		        and (self.axis, self.coordinate) == (other.axis, other.coordinate))

	def __hash__(self):
		return hash((self.axis, self.coordinate))

	def __repr__(self):
		return f"{self.__class__.__name__}({self.axis.name}, {self.coordinate})"


	## Membership ##################################################################################

	def getMembers(self):
		index = [slice(None)] * 3
		index[self.axis.value] = self.coordinate + 1
		return list(self.cube.grid[tuple(index)].ravel())

	def contains(self, piece):
		return piece.getPosition()[self.axis.value] == self.coordinate

	def getCenter(self):
		centers = [p for p in self.getMembers() if p.isCenter()]
		if len(centers) != 1:
			raise GeometryInvariantViolation(f"{self} has {len(centers)} centers")
		return centers[0]

	def getEdges(self):
		return [p for p in self.getMembers() if p.isEdge()]

	def getCorners(self):
		return [p for p in self.getMembers() if p.isCorner()]

	def getOverlap(self, pieces):
		pieces = list(pieces)
		return [p for p in self.getMembers() if any(p is q for q in pieces)]


	## Geometry ####################################################################################

	def getDirection(self):
		"""
		Outward world direction; middle slices report the positive axis direction
		"""
		if self.coordinate == 0:
			return self.axis.direction
		return Direction.fromVector(self.axis.direction.vector * self.coordinate)

	def getCenterFaceColor(self):
		"""
		Color shown by this face's center piece on the outward side
		"""
		direction = self.getDirection()
		return self.getCenter().getFaces()[direction]

	def _getAnchor(self):
		anchor = np.zeros(3, dtype=int)
		anchor[self.axis.value] = self.coordinate
		return anchor

	def getRotationDegrees(self, source, target):
		"""
		Smallest signed quarter turn (0, 90, 180, -90) of this slice which moves `source`
		onto `target`. Both are either pieces or directions; directions are resolved to
		the pieces offset by them from the point where the axis crosses the slice.
		"""
		if isinstance(source, Direction):
			source = self._getPieceInDirection(source)
		if isinstance(target, Direction):
			target = self._getPieceInDirection(target)

		position = np.array(source.getPosition())
		for degrees in (0, 90, 180, 270):
			if tuple(rotationMatrix(self.axis, degrees) @ position) == target.getPosition():
				return normalizeDegrees(degrees)

		raise GeometryInvariantViolation(
			f"No rotation of {self} moves {source} onto {target}")

	def _getPieceInDirection(self, direction):
		if direction.axis == self.axis:
			raise GeometryInvariantViolation(f"{direction} does not lie in {self}")
		return self.cube.getPiece(self._getAnchor() + direction.vector)

	def rotate(self, degrees):
		self.cube.rotate(self, degrees)



## The cube ########################################################################################


class Rubik_3x3x3:
	"""
	A 3×3×3 Rubik's cube made of 27 pieces, turned slice by slice
	"""

	# color painted on every piece face looking this way at construction
	defaultFaceColors = {
		Direction.left:    Color.red,
		Direction.right:   Color.orange,
		Direction.down:    Color.yellow,
		Direction.up:      Color.white,
		Direction.back:    Color.blue,
		Direction.forward: Color.green,
	}

	def __init__(self, *, faceColors=None):
		self.faceColors = dict(self.defaultFaceColors if faceColors is None else faceColors)
		if set(self.faceColors) != set(Direction):
			raise ValueError("A color is needed for each of the six faces")
		if Color.neutral in self.faceColors.values():
			raise ValueError("Faces cannot be painted neutral")

		self._rememberedStates = []

		# all possible whole turns, used for scrambling
		self.scramblingTurns = [Turn(axis, coordinate, degrees)
		                        for axis in Axis
		                        for coordinate in (-1, 0, 1)
		                        for degrees in (90, 180, -90)]

		self.reset()


	def __str__(self):
		return f"{self.__class__.__name__}()"


	## Accessing cube state ########################################################################

	def getPieces(self):
		return list(self.pieces)

	def getPiece(self, position):
		position = np.asarray(position, dtype=int)
		if position.shape != (3,) or np.abs(position).max() > 1:
			raise GeometryInvariantViolation(f"No grid cell at {tuple(position)}")
		return self.grid[tuple(position + 1)]

	def slice(self, axisOrDirection, coordinate=None):
		"""
		`slice(Direction.up)` is the top face, `slice(Axis.y, 0)` the horizontal middle slice
		"""
		if isinstance(axisOrDirection, Direction):
			if coordinate is not None:
				raise ValueError(f"A face slice takes no coordinate, got {coordinate}")
			return Slice.fromDirection(self, axisOrDirection)
		return Slice(self, axisOrDirection, coordinate)

	def getState(self):
		"""
		Position and orientation of every piece, in construction order
		"""
		return tuple((p.position, tuple(map(tuple, p.rotation))) for p in self.pieces)

	def setState(self, state):
		assert len(state) == len(self.pieces)
		for piece, (position, rotation) in zip(self.pieces, state):
			piece.position = tuple(position)
			piece.rotation = np.array(rotation, dtype=int)
		self._rebuildGrid()

	def rememberState(self, state=None):
		self._rememberedStates.append(self.getState())
		if state is not None:
			self.setState(state)
		return self.getState()

	def restoreState(self):
		self.setState(self._rememberedStates.pop())


	## Handling turns ##############################################################################

	def rotate(self, slice_, degrees):
		"""
		Rotates every member of `slice_` by `degrees` about its axis.
		All new positions are computed before any piece is updated.
		"""
		matrix = rotationMatrix(slice_.axis, degrees)
		members = slice_.getMembers()
		newPositions = [tuple(int(c) for c in matrix @ np.array(p.position)) for p in members]
		for piece, position in zip(members, newPositions):
			piece.position = position
			piece.rotation = matrix @ piece.rotation
		for piece in members:
			self.grid[tuple(np.array(piece.position) + 1)] = piece

	def turn(self, turn):
		self.rotate(self.slice(turn.axis, turn.coordinate), turn.degrees)

	def applyTurns(self, turns):
		for turn in turns:
			self.turn(turn)


	## Handling higher-level operations ############################################################

	def reset(self):
		self.pieces = []
		for x in (-1, 0, 1):
			for y in (-1, 0, 1):
				for z in (-1, 0, 1):
					position = (x, y, z)
					colors = { direction: color for direction, color in self.faceColors.items()
					           if position[direction.axis.value] == direction.sign }
					self.pieces.append(Piece(self, position, colors))
		self._rebuildGrid()

	def _rebuildGrid(self):
		self.grid = np.empty((3, 3, 3), dtype=object)
		for piece in self.pieces:
			self.grid[tuple(np.array(piece.position) + 1)] = piece
		assert all(cell is not None for cell in self.grid.ravel()), "Pieces overlap"

	def scramble(self, moves=30, seed=None):
		rng = np.random.default_rng(seed)
		turns = []
		for i in range(moves):
			turnInd = rng.integers(len(self.scramblingTurns))
			turn = self.scramblingTurns[turnInd]
			self.turn(turn)
			turns.append(turn)
		return turns


	## Misc analysis ###############################################################################

	def getFacelets(self):
		"""
		Yields (world direction, color) of every visible sticker
		"""
		for piece in self.pieces:
			for direction, color in piece.getFaces().items():
				yield direction, color

	def isSolved(self):
		colors = { direction: set() for direction in Direction }
		for direction, color in self.getFacelets():
			colors[direction].add(color)
		return all(len(c) == 1 for c in colors.values())

	def getScore(self):
		"""
		Fraction of stickers matching the center of the face they are on
		"""
		centerColors = { d: self.slice(d).getCenterFaceColor() for d in Direction }
		facelets = list(self.getFacelets())
		return sum(centerColors[d] == c for d, c in facelets) / len(facelets)
