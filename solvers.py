from enum import IntEnum
import logging
import re

import numpy as np

from cubes import (
	Axis,
	Color,
	Direction,
	GeometryInvariantViolation,
	InvalidStageDispatch,
	PreconditionViolation,
	Turn,
	normalizeDegrees,
	rotationMatrix,
)
from sequences import TurnSequence


logger = logging.getLogger(__name__)



## Frame-relative algorithms #######################################################################


# horizontal facings in the order they are searched
sideDirections = [Direction.forward, Direction.back, Direction.left, Direction.right]

_moveRe = re.compile(r"([UDLRFB])(2|')?")


def getFrame(facing):
	"""
	Maps face letters to world directions for a viewer looking at the `facing` side
	with the up direction on top
	"""
	if facing.axis == Axis.y:
		raise ValueError(f"Facing must be horizontal, not {facing}")
	right = Direction.fromVector(np.cross(Direction.up.vector, facing.vector))
	return {
		"F": facing,         "B": -facing,
		"U": Direction.up,   "D": Direction.down,
		"R": right,          "L": -right,
	}


def getFramePosition(facing, name):
	"""
	Grid position of a piece named by its faces in the frame of `facing`, e.g. "UFL"
	"""
	frame = getFrame(facing)
	return tuple(int(c) for c in sum(frame[letter].vector for letter in name))


def parseAlgorithm(algorithm, facing=Direction.forward):
	"""
	Translates face notation ("R U R' U2") seen from `facing` into world `Turn`s.
	A plain letter is a clockwise quarter turn of that face looked at from outside.
	"""
	frame = getFrame(facing)
	turns = []
	for code in algorithm.split():
		match = _moveRe.fullmatch(code)
		if match is None:
			raise ValueError(f"Bad move: {code}")
		letter, suffix = match.groups()
		quarters = { None: 1, "'": -1, "2": 2 }[suffix]
		direction = frame[letter]
		degrees = normalizeDegrees(-90 * quarters * direction.sign)
		turns.append(Turn(direction.axis, direction.sign, degrees))
	return turns


# two-edges-up cases of the last layer cross
lineAlgorithm = "F R U R' U' F'"
angledAlgorithm = "F U R U' R' F'"
# brings an edge at the front of the top layer, primary color facing front, to the top
# with the primary color up, keeping the bottom layer edges
edgeFlipAlgorithm = "F R U' R' F'"
# twists three last layer corners
suneAlgorithm = "R U R' U R U2 R'"
# cycles last layer corners UFR -> UBL -> UBR, keeps UFL and all orientations
cornerCycleAlgorithm = "R' F R' B2 R F' R' B2 R2"
# cycles last layer edges UF -> UR -> UL, keeps UB and the corners
edgeCycleAlgorithm = "R U' R U R U R U' R' U' R2"



## Solvers #########################################################################################


class RubikSolver:
	"""
	Base class for Rubik's cube solvers
	"""

	# how many consecutive empty turn sequences are accepted before giving up
	maxEmptySteps = 4

	def __init__(self, cube, seed=None):
		self.cube = cube
		self.rng = np.random.default_rng(seed)
		self.reset()


	def reset(self):
		self._turnBuffer = []


	def makeMove(self):
		"""
		Advances the linked cube by one turn.
		Returns the turn made, or None once the solver has nothing left to do.
		"""
		emptySteps = 0
		while not self._turnBuffer:
			if self._isFinished():
				return None
			turns = self._generateMoves()
			self._turnBuffer.extend(turns)
			if not turns:
				emptySteps += 1
				if emptySteps > self.maxEmptySteps:
					raise GeometryInvariantViolation(
						f"{self.__class__.__name__} keeps returning empty turn sequences")
		turn = self._turnBuffer.pop(0)
		self.cube.turn(turn)
		return turn


	def generateSequence(self, *, numMoves=1000, scrambleMoves=30, seed=None):
		"""
		Scrambles the linked cube and records up to `numMoves` solving turns as a `TurnSequence`
		"""
		if seed is not None:
			self.rng = np.random.default_rng(seed)
		self.cube.reset()
		self.cube.scramble(scrambleMoves, seed=self.rng.integers(0x7FFFFFFFFFFFFFFF))
		self.reset()

		seq = TurnSequence(self.cube, states=[self.cube.getState()], turns=[])
		for i in range(numMoves):
			turn = self.makeMove()
			if turn is None:
				break
			seq.turns.append(turn)
			seq.states.append(self.cube.getState())
		return seq


	# "abstract" methods

	def _isFinished(self):
		return False

	def _generateMoves(self):
		"""
		Runs whatever solving algorithm the specific solver implements,
		returns a list of `Turn`s to be performed.
		"""
		raise NotImplementedError(f"{self.__class__.__name__}._generateMoves")


####################################################################################################


Stage = IntEnum("Stage", [
	"WhiteCenter",
	"WhiteCross",
	"WhiteCorners",
	"MiddleEdges",
	"YellowCross",
	"YellowCorners",
	"TopCorners",
	"TopEdges",
	"Solved",
])


class LayerSolver(RubikSolver):
	"""
	Beginner's layer-by-layer method in nine stages.

	The primary ("white") color is solved on the down face first, the opposite ("yellow")
	color on the up face last. Every call re-reads the cube geometry; the only state kept
	between calls is the current stage and `pendingPiece`, a piece whose maneuver takes
	two consecutive steps.
	"""

	def __init__(self, cube, *, primaryColor=Color.white, oppositeColor=Color.yellow, seed=None):
		faceColors = cube.faceColors
		primaryFaces = [d for d, c in faceColors.items() if c == primaryColor]
		oppositeFaces = [d for d, c in faceColors.items() if c == oppositeColor]
		if len(primaryFaces) != 1 or len(oppositeFaces) != 1 or primaryFaces[0] != -oppositeFaces[0]:
			raise ValueError(
				f"{primaryColor.name} and {oppositeColor.name} must be colors of opposite faces")
		self.primaryColor = primaryColor
		self.oppositeColor = oppositeColor

		self._stageChecks = {
			Stage.WhiteCenter:   self._isWhiteCenterDone,
			Stage.WhiteCross:    self._isWhiteCrossDone,
			Stage.WhiteCorners:  self._isWhiteCornersDone,
			Stage.MiddleEdges:   self._isMiddleEdgesDone,
			Stage.YellowCross:   self._isYellowCrossDone,
			Stage.YellowCorners: self._isYellowCornersDone,
			Stage.TopCorners:    self._isTopCornersDone,
			Stage.TopEdges:      self._isTopEdgesDone,
		}
		self._stageSolvers = {
			Stage.WhiteCenter:   self._solveWhiteCenter,
			Stage.WhiteCross:    self._solveWhiteCross,
			Stage.WhiteCorners:  self._solveWhiteCorners,
			Stage.MiddleEdges:   self._solveMiddleEdges,
			Stage.YellowCross:   self._solveYellowCross,
			Stage.YellowCorners: self._solveYellowCorners,
			Stage.TopCorners:    self._solveTopCorners,
			Stage.TopEdges:      self._solveTopEdges,
			Stage.Solved:        self._solveNothing,
		}

		super().__init__(cube, seed)


	def reset(self):
		super().reset()
		self.stage = Stage.WhiteCenter
		self.pendingPiece = None


	def __str__(self):
		return (f"{self.__class__.__name__}(primaryColor={self.primaryColor.name}, "
		        f"oppositeColor={self.oppositeColor.name})")


	## State machine ###############################################################################

	def checkState(self):
		"""
		Advances `stage` past every stage already completed on the cube, returns the result.
		Never moves back; safe to call any number of times.
		"""
		while self.stage != Stage.Solved:
			check = self._stageChecks.get(self.stage)
			if check is None:
				raise InvalidStageDispatch(f"Unknown stage: {self.stage}")
			if not check():
				break
			self.stage = Stage(self.stage + 1)
			self.pendingPiece = None
			logger.info("Stage reached: %s", self.stage.name)
		return self.stage


	def solveStep(self):
		"""
		Returns the turns leading towards completing the current stage (possibly none)
		"""
		handler = self._stageSolvers.get(self.stage)
		if handler is None:
			raise InvalidStageDispatch(f"Unknown stage: {self.stage}")
		turns = handler()
		logger.debug("%s: %d turns", self.stage.name, len(turns))
		return turns


	def solve(self, maxSteps=1000, untilStage=Stage.Solved):
		"""
		Runs the state machine, applying the turns to the cube, until `untilStage` is completed
		(to the end by default). Returns all turns made.
		"""
		allTurns = []
		for step in range(maxSteps):
			stage = self.checkState()
			if stage == Stage.Solved or stage > untilStage:
				return allTurns
			turns = self.solveStep()
			self.cube.applyTurns(turns)
			allTurns.extend(turns)
		raise RuntimeError(f"Cube not solved after {maxSteps} steps (stage {self.stage.name})")


	def _isFinished(self):
		return self.checkState() == Stage.Solved

	def _solveNothing(self):
		return []

	def _generateMoves(self):
		self.checkState()
		return self.solveStep()


	## Introspection ###############################################################################

	def getPieceToSolve(self):
		"""
		The piece the current stage works on, None for stages working on a whole layer
		"""
		if self.stage == Stage.WhiteCenter:
			return self._getWhiteCenter()
		candidates = {
			Stage.WhiteCross:   self._getWhiteEdgeCandidates,
			Stage.WhiteCorners: self._getWhiteCornerCandidates,
			Stage.MiddleEdges:  self._getMiddleEdgeCandidates,
		}.get(self.stage)
		if candidates is None:
			return None
		if self.pendingPiece is not None:
			return self.pendingPiece
		pieces = candidates()
		return pieces[0] if pieces else None

	def getSolveFacingDirection(self):
		"""
		The side a last layer algorithm is applied from, None when no algorithm is due
		"""
		if self.stage == Stage.YellowCross:
			facing, _ = self._getYellowCrossFacing()
			return facing
		if self.stage == Stage.YellowCorners:
			return self._getYellowCornersFacing()
		if self.stage == Stage.TopCorners:
			degrees, correct = self._getTopCornersAlignment()
			if degrees != 0 or correct == 4:
				return None
			return self._getTopCornersFacing()
		if self.stage == Stage.TopEdges:
			return self._getTopEdgesFacing()
		return None


	## Geometric helpers ###########################################################################

	def _turn(self, direction, degrees):
		return Turn(direction.axis, direction.sign, normalizeDegrees(degrees))

	def _getCenterColor(self, direction):
		return self.cube.slice(direction).getCenterFaceColor()

	def _takePending(self):
		piece, self.pendingPiece = self.pendingPiece, None
		return piece

	def _getEdgeDirections(self, piece):
		"""
		(primary-colored direction, other direction) of a primary-colored edge
		"""
		if not piece.isEdge() or not piece.hasColor(self.primaryColor):
			raise PreconditionViolation(f"{piece} is not a {self.primaryColor.name} edge")
		primaryDirection = otherDirection = None
		for direction, color in piece.getFaces().items():
			if color == self.primaryColor:
				primaryDirection = direction
			else:
				otherDirection = direction
		return primaryDirection, otherDirection

	def _getCornerDirections(self, piece):
		"""
		(primary-colored direction, other directions, horizontal directions) of a
		primary-colored corner
		"""
		if not piece.isCorner() or not piece.hasColor(self.primaryColor):
			raise PreconditionViolation(f"{piece} is not a {self.primaryColor.name} corner")
		faces = piece.getFaces()
		primaryDirection = piece.getDirectionOf(self.primaryColor)
		otherDirections = [d for d in faces if d != primaryDirection]
		sides = [d for d in sideDirections if d in faces]
		return primaryDirection, otherDirections, sides

	def _getLayer(self, piece):
		height = piece.getPosition()[1]
		if height == 0:
			raise PreconditionViolation(f"{piece} is not in the top or bottom layer")
		return self.cube.slice(Direction.up if height > 0 else Direction.down)

	def _getCorrectEdgeSlot(self, piece):
		"""
		The edge of the piece's (top or bottom) layer sitting where the piece belongs
		"""
		_, otherDirection = self._getEdgeDirections(piece)
		color = piece.getFaces()[otherDirection]
		for edge in self._getLayer(piece).getEdges():
			side, = edge.getSideDirections()
			if self._getCenterColor(side) == color:
				return edge
		raise GeometryInvariantViolation(f"No slot for {piece}")

	def _getCorrectCornerSlot(self, piece):
		"""
		The corner of the piece's (top or bottom) layer sitting where the piece belongs
		"""
		colors = set(piece.getFaces().values()) - { self.primaryColor }
		for corner in self._getLayer(piece).getCorners():
			if { self._getCenterColor(s) for s in corner.getSideDirections() } == colors:
				return corner
		raise GeometryInvariantViolation(f"No slot for {piece}")

	def _getSidesOfPosition(self, position):
		return [d for d in sideDirections if position[d.axis.value] == d.sign]

	def _isTopCornerInSlot(self, corner, position):
		colors = set(corner.getFaces().values()) - { self.oppositeColor }
		return colors == { self._getCenterColor(s) for s in self._getSidesOfPosition(position) }

	def _isTopEdgeInSlot(self, edge):
		side, = edge.getSideDirections()
		return edge.getFaces().get(side) == self._getCenterColor(side)

	def _showsOpposite(self, piece, direction):
		return piece.getFaces().get(direction) == self.oppositeColor


	## Completion checks ###########################################################################

	def _isWhiteCenterDone(self):
		return self._getCenterColor(Direction.down) == self.primaryColor

	def _isWhiteEdgeCorrect(self, edge):
		if edge.getPosition()[1] != -1:
			return False
		if edge.getFaces().get(Direction.down) != self.primaryColor:
			return False
		return edge is self._getCorrectEdgeSlot(edge)

	def _isWhiteCornerCorrect(self, corner):
		if corner.getPosition()[1] != -1:
			return False
		if corner.getFaces().get(Direction.down) != self.primaryColor:
			return False
		return corner is self._getCorrectCornerSlot(corner)

	def _isMiddleEdgeCorrect(self, edge):
		if edge.getPosition()[1] != 0:
			return False
		return all(self._getCenterColor(d) == c for d, c in edge.getFaces().items())

	def _isWhiteCrossDone(self):
		return all(self._isWhiteEdgeCorrect(e) for e in self.cube.slice(Direction.down).getEdges())

	def _isWhiteCornersDone(self):
		return all(self._isWhiteCornerCorrect(c)
		           for c in self.cube.slice(Direction.down).getCorners())

	def _isMiddleEdgesDone(self):
		return all(self._isMiddleEdgeCorrect(e) for e in self.cube.slice(Axis.y, 0).getEdges())

	def _isYellowCrossDone(self):
		return all(self._showsOpposite(e, Direction.up)
		           for e in self.cube.slice(Direction.up).getEdges())

	def _isYellowCornersDone(self):
		return all(self._showsOpposite(c, Direction.up)
		           for c in self.cube.slice(Direction.up).getCorners())

	def _isTopCornersDone(self):
		return all(self._isTopCornerInSlot(c, c.getPosition())
		           for c in self.cube.slice(Direction.up).getCorners())

	def _isTopEdgesDone(self):
		return all(self._isTopEdgeInSlot(e) for e in self.cube.slice(Direction.up).getEdges())


	## Candidate selection #########################################################################

	def _getWhiteCenter(self):
		for piece in self.cube.getPieces():
			if piece.isCenter() and piece.hasColor(self.primaryColor):
				return piece
		raise GeometryInvariantViolation(f"No {self.primaryColor.name} center")

	def _getWhiteEdgeCandidates(self):
		"""
		Misplaced primary edges: top to bottom, primary-up first in the top layer, then x and z
		"""
		def key(piece):
			x, y, z = piece.getPosition()
			notUp = int(y == 1 and piece.getFaces().get(Direction.up) != self.primaryColor)
			return (-y, notUp, x, z)
		return sorted((p for p in self.cube.getPieces()
		               if p.isEdge() and p.hasColor(self.primaryColor)
		               and not self._isWhiteEdgeCorrect(p)), key=key)

	def _getWhiteCornerCandidates(self):
		"""
		Misplaced primary corners: top to bottom, primary-up last in the top layer, then x and z
		"""
		def key(piece):
			x, y, z = piece.getPosition()
			up = int(y == 1 and piece.getFaces().get(Direction.up) == self.primaryColor)
			return (-y, up, x, z)
		return sorted((p for p in self.cube.getPieces()
		               if p.isCorner() and p.hasColor(self.primaryColor)
		               and not self._isWhiteCornerCorrect(p)), key=key)

	def _getMiddleEdgeCandidates(self):
		def key(piece):
			x, y, z = piece.getPosition()
			return (-y, x, z)
		return sorted((p for p in self.cube.getPieces()
		               if p.isEdge()
		               and not p.hasColor(self.primaryColor)
		               and not p.hasColor(self.oppositeColor)
		               and not self._isMiddleEdgeCorrect(p)), key=key)

	def _selectPiece(self, candidates):
		piece = self._takePending()
		if piece is not None:
			return piece
		pieces = candidates()
		if not pieces:
			raise GeometryInvariantViolation(f"Nothing left to solve in stage {self.stage.name}")
		return pieces[0]


	## First layer #################################################################################

	def _solveWhiteCenter(self):
		piece = self._getWhiteCenter()
		direction, = piece.getFaces()

		if direction == Direction.down:
			return []
		if direction == Direction.up:
			return [Turn(Axis.x, 0, 180)]

		# a middle slice through both the center and the down center
		axis = Axis.z if direction.axis == Axis.x else Axis.x
		middle = self.cube.slice(axis, 0)
		return [Turn(axis, 0, middle.getRotationDegrees(direction, Direction.down))]


	def _solveWhiteCross(self):
		piece = self._selectPiece(self._getWhiteEdgeCandidates)
		whiteDirection, otherDirection = self._getEdgeDirections(piece)
		height = piece.getPosition()[1]

		if whiteDirection in (Direction.up, Direction.down):
			correctEdge = self._getCorrectEdgeSlot(piece)

			if correctEdge is piece:
				if whiteDirection == Direction.down:
					return []
				# above its slot with white up, flip down
				return [self._turn(otherDirection, 180)]

			if whiteDirection == Direction.down:
				# wrong bottom slot, lift to the top
				return [self._turn(otherDirection, 180)]

			upSlice = self.cube.slice(Direction.up)
			self.pendingPiece = piece
			return [self._turn(Direction.up, upSlice.getRotationDegrees(piece, correctEdge))]

		if height == -1:
			# bottom layer, white on the side: put it in the top layer
			return [self._turn(whiteDirection, 180)]

		if height == 1:
			# top layer, white on the side: turn white up
			return parseAlgorithm(edgeFlipAlgorithm, facing=whiteDirection)

		# middle layer, move to the top layer with white up, keeping the bottom edges
		sideSlice = self.cube.slice(otherDirection)
		degrees = sideSlice.getRotationDegrees(whiteDirection, Direction.up)
		return [
			self._turn(otherDirection, degrees),
			self._turn(Direction.up, 90),
			self._turn(otherDirection, -degrees),
		]


	def _solveWhiteCorners(self):
		piece = self._selectPiece(self._getWhiteCornerCandidates)
		whiteDirection, _, sides = self._getCornerDirections(piece)
		upSlice = self.cube.slice(Direction.up)

		if piece.getPosition()[1] == -1:
			# wrong bottom slot: twist one of its sides to bring it up, turn it away, twist back
			rotationSide = sides[0] if whiteDirection == Direction.down else whiteDirection
			otherSide, = [s for s in sides if s != rotationSide]
			sideDegrees = self.cube.slice(rotationSide).getRotationDegrees(otherSide, Direction.up)
			upperDegrees = upSlice.getRotationDegrees(rotationSide, otherSide)
			return [
				self._turn(rotationSide, sideDegrees),
				self._turn(Direction.up, upperDegrees),
				self._turn(rotationSide, -sideDegrees),
			]

		wantedCorner = self._getCorrectCornerSlot(piece)
		if wantedCorner is not piece:
			self.pendingPiece = piece
			return [self._turn(Direction.up, upSlice.getRotationDegrees(piece, wantedCorner))]

		if whiteDirection == Direction.up:
			# above its slot with white up: turn white to a side, the corner returns here
			sideA, sideB = sides
			sideDegrees = self.cube.slice(sideA).getRotationDegrees(sideB, Direction.up)
			upperDegrees = upSlice.getRotationDegrees(sideA, sideB)
			self.pendingPiece = piece
			return [
				self._turn(sideA, sideDegrees),
				self._turn(Direction.up, 2 * upperDegrees),
				self._turn(sideA, -sideDegrees),
				self._turn(Direction.up, -upperDegrees),
			]

		# above its slot with white on a side: insert
		otherSide, = [s for s in sides if s != whiteDirection]
		sideDegrees = self.cube.slice(whiteDirection).getRotationDegrees(otherSide, Direction.up)
		upperDegrees = upSlice.getRotationDegrees(whiteDirection, otherSide)
		return [
			self._turn(whiteDirection, sideDegrees),
			self._turn(Direction.up, upperDegrees),
			self._turn(whiteDirection, -sideDegrees),
		]


	## Second layer ################################################################################

	def _insertMiddleEdge(self, facingSide, targetSide):
		"""
		Moves the top edge in front of `facingSide` into the middle slot between `facingSide`
		and `targetSide`; whatever occupied the slot ends up in the top layer
		"""
		upSlice = self.cube.slice(Direction.up)
		upperDegrees = upSlice.getRotationDegrees(facingSide, -targetSide)
		targetDegrees = self.cube.slice(targetSide).getRotationDegrees(facingSide, Direction.up)
		facingDegrees = self.cube.slice(facingSide).getRotationDegrees(Direction.up, -targetSide)
		return [
			self._turn(Direction.up, upperDegrees),
			self._turn(targetSide, targetDegrees),
			self._turn(Direction.up, -upperDegrees),
			self._turn(targetSide, -targetDegrees),

			self._turn(Direction.up, -upperDegrees),
			self._turn(facingSide, facingDegrees),
			self._turn(Direction.up, upperDegrees),
			self._turn(facingSide, -facingDegrees),
		]

	def _solveMiddleEdges(self):
		piece = self._selectPiece(self._getMiddleEdgeCandidates)
		faces = piece.getFaces()
		height = piece.getPosition()[1]

		if height == 0:
			# wrong middle slot, pop it out by inserting whatever is above
			facingSide, targetSide = [d for d in sideDirections if d in faces]
			return self._insertMiddleEdge(facingSide, targetSide)

		if height != 1:
			raise GeometryInvariantViolation(f"Middle layer edge {piece} found in the bottom layer")

		upColor = faces[Direction.up]
		facingSide, = [d for d in faces if d != Direction.up]
		facingColor = faces[facingSide]

		upColorSide = wantedPiece = None
		for side in sideDirections:
			sideColor = self._getCenterColor(side)
			if sideColor == upColor:
				upColorSide = side
			if sideColor == facingColor:
				wantedPiece = self.cube.getPiece(side.vector + Direction.up.vector)
		if upColorSide is None or wantedPiece is None:
			raise GeometryInvariantViolation(f"No slot for {piece}")

		if wantedPiece is not piece:
			upSlice = self.cube.slice(Direction.up)
			self.pendingPiece = piece
			return [self._turn(Direction.up, upSlice.getRotationDegrees(piece, wantedPiece))]

		return self._insertMiddleEdge(facingSide, upColorSide)


	## Last layer ##################################################################################

	def _getYellowCrossFacing(self):
		"""
		(facing, angled) for the next cross algorithm; (None, False) when the cross is done
		"""
		upEdges = self.cube.slice(Direction.up).getEdges()
		count = sum(self._showsOpposite(e, Direction.up) for e in upEdges)

		if count == 4:
			return None, False
		if count == 0:
			return Direction.forward, False
		if count != 2:
			raise GeometryInvariantViolation(f"{count} top edges oriented, cube is corrupted")

		for facing in sideDirections:
			oriented = { name: self._showsOpposite(
			                 self.cube.getPiece(getFramePosition(facing, name)), Direction.up)
			             for name in ("UL", "UB", "UR") }
			if not oriented["UL"]:
				continue
			if oriented["UB"]:
				return facing, True
			if oriented["UR"]:
				return facing, False

		raise GeometryInvariantViolation("No facing matches the top edges")

	def _solveYellowCross(self):
		facing, angled = self._getYellowCrossFacing()
		if facing is None:
			return []
		return parseAlgorithm(angledAlgorithm if angled else lineAlgorithm, facing)


	def _getYellowCornersFacing(self):
		"""
		Facing for the corner twisting algorithm: the front-left top corner shows the opposite
		color left with no corner oriented, up with one, front with two
		"""
		upCorners = self.cube.slice(Direction.up).getCorners()
		count = sum(self._showsOpposite(c, Direction.up) for c in upCorners)
		if count == 4:
			return None
		if count == 3:
			raise GeometryInvariantViolation("3 top corners oriented, cube is corrupted")

		for facing in sideDirections:
			frame = getFrame(facing)
			wanted = { 0: frame["L"], 1: frame["U"], 2: frame["F"] }[count]
			corner = self.cube.getPiece(getFramePosition(facing, "UFL"))
			if self._showsOpposite(corner, wanted):
				return facing

		raise GeometryInvariantViolation("No facing matches the top corners")

	def _solveYellowCorners(self):
		facing = self._getYellowCornersFacing()
		if facing is None:
			return []
		return parseAlgorithm(suneAlgorithm, facing)


	def _getTopCornersAlignment(self):
		"""
		(degrees, count): top turn putting most top corners into their slots, preferring
		small turns, and how many corners it puts there
		"""
		corners = self.cube.slice(Direction.up).getCorners()
		best = None
		for degrees in (0, 90, -90, 180):
			matrix = rotationMatrix(Axis.y, degrees)
			count = sum(self._isTopCornerInSlot(c, tuple(matrix @ np.array(c.getPosition())))
			            for c in corners)
			if best is None or count > best[1]:
				best = (degrees, count)
		if best[1] not in (2, 4):
			raise GeometryInvariantViolation(f"At most {best[1]} top corners fit, cube is corrupted")
		return best

	def _getTopCornersFacing(self):
		"""
		With two top corners out of place: facing with both in front if they are neighbors,
		facing with a correct corner at front left if they are diagonal
		"""
		wrongPositions = { c.getPosition() for c in self.cube.slice(Direction.up).getCorners()
		                   if not self._isTopCornerInSlot(c, c.getPosition()) }
		if len(wrongPositions) != 2:
			raise PreconditionViolation(f"{len(wrongPositions)} top corners out of place, 2 expected")
		first, second = wrongPositions
		adjacent = sum(a != b for a, b in zip(first, second)) == 1

		for facing in sideDirections:
			frontLeft = getFramePosition(facing, "UFL")
			frontRight = getFramePosition(facing, "UFR")
			if adjacent and wrongPositions == { frontLeft, frontRight }:
				return facing
			if not adjacent and frontLeft not in wrongPositions:
				return facing

		raise GeometryInvariantViolation("No facing matches the top corners")

	def _solveTopCorners(self):
		degrees, count = self._getTopCornersAlignment()
		if degrees != 0:
			return [self._turn(Direction.up, degrees)]
		if count == 4:
			return []
		return parseAlgorithm(cornerCycleAlgorithm, self._getTopCornersFacing())


	def _getTopEdgesFacing(self):
		"""
		Facing for the edge cycling algorithm: the edge already in its slot at the back
		"""
		upEdges = self.cube.slice(Direction.up).getEdges()
		correct = [e for e in upEdges if self._isTopEdgeInSlot(e)]
		if len(correct) == 4:
			return None
		if len(correct) == 0:
			return Direction.forward
		if len(correct) != 1:
			raise GeometryInvariantViolation(f"{len(correct)} top edges in place, cube is corrupted")

		for facing in sideDirections:
			if getFramePosition(facing, "UB") == correct[0].getPosition():
				return facing

		raise GeometryInvariantViolation("No facing matches the top edges")

	def _solveTopEdges(self):
		facing = self._getTopEdgesFacing()
		if facing is None:
			return []
		return parseAlgorithm(edgeCycleAlgorithm, facing)
