from cubes import Axis, Direction, invertTurn, normalizeDegrees, Turn



# world face letter of each outer slice, and the middle slice letters with the face they follow
_faceLetters = {
	Direction.right: "R",  Direction.left: "L",
	Direction.up: "U",     Direction.down: "D",
	Direction.forward: "F", Direction.back: "B",
}
_middleLetters = {
	Axis.x: ("M", Direction.left),
	Axis.y: ("E", Direction.down),
	Axis.z: ("S", Direction.forward),
}
_quarterSuffixes = { 1: "", -1: "'", 2: "2", -2: "2" }


def turnToNotation(turn):
	"""
	Face notation of a world turn, as seen from the front
	"""
	if turn.coordinate == 0:
		letter, followed = _middleLetters[turn.axis]
		sign = followed.sign
	else:
		direction = Direction.fromVector(turn.axis.direction.vector * turn.coordinate)
		letter = _faceLetters[direction]
		sign = direction.sign
	degrees = normalizeDegrees(turn.degrees)
	if degrees == 0:
		raise ValueError(f"Zero turn has no notation: {turn}")
	quarters = -degrees // 90 * sign
	return letter + _quarterSuffixes[quarters]



class TurnSequence:
	"""
	Represents a sequence of Rubik's cube states and turns between them
	"""


	def __init__(self, cube, states=None, turns=None):
		if states is None:
			states = []
		if turns is None:
			turns = []
		self.cube = cube
		self.states = list(states)
		self.turns = list(turns)


	def __len__(self):
		return len(self.turns)


	@staticmethod
	def fromTurns(turns, cube, init=None):
		"""
		Builds a `TurnSequence` from `cube`, an initial state (current one if None), and a sequence
		of turns. The cube is left as it was.
		"""
		cube.rememberState(init)
		states = [cube.getState()]
		for turn in turns:
			cube.turn(turn)
			states.append(cube.getState())
		cube.restoreState()
		return TurnSequence(
			cube = cube,
			states = states,
			turns = turns,
		)


	def check(self):
		"""
		Checks that states correspond to turns
		"""
		assert len(self.states) == len(self.turns)+1
		self.cube.setState(self.states[0])
		for i, turn in enumerate(self.turns, start=1):
			self.cube.turn(turn)
			assert self.cube.getState() == self.states[i]
		return self


	def _isSolvedState(self, state):
		self.cube.rememberState(state)
		solved = self.cube.isSolved()
		self.cube.restoreState()
		return solved

	def isSolved(self, anywhere=False):
		"""
		Checks if the seqence ends with a solved state,
		or contains a solved state when `anywhere`
		"""
		if anywhere:
			return self.getSolvedIndex() >= 0
		return self._isSolvedState(self.states[-1])


	def getSolvedIndex(self):
		"""
		Finds index of the first state in sequence which is solved.
		Returns -1 if no solved state found.
		"""
		for i, state in enumerate(self.states):
			if self._isSolvedState(state):
				return i
		return -1


	def toNotation(self):
		"""
		Face notation of the turns, zero turns left out
		"""
		return " ".join(turnToNotation(t) for t in self.turns if normalizeDegrees(t.degrees) != 0)



	## Sequence transforms #########################################################################


	def invert(self):
		"""
		Inverts the order of states and turns in the sequence.
		Returns a new TurnSequence, self is unchanged.
		"""
		return TurnSequence(
			cube = self.cube,
			states = self.states[::-1],
			turns = [invertTurn(t) for t in self.turns[::-1]],
		)


	def simplify(self):
		"""
		Merges consecutive turns of the same slice and removes turns that cancel out.
		Returns a new TurnSequence, self is unchanged.
		"""
		turns = []
		for turn in self.turns:
			if turns and turns[-1][:2] == turn[:2]:
				previous = turns.pop()
				degrees = normalizeDegrees(previous.degrees + turn.degrees)
				if degrees != 0:
					turns.append(Turn(turn.axis, turn.coordinate, degrees))
			elif normalizeDegrees(turn.degrees) != 0:
				turns.append(turn)

		if not self.states:
			return TurnSequence.fromTurns(turns, self.cube)
		seq = TurnSequence.fromTurns(turns, self.cube, self.states[0])
		assert seq.states[-1] == self.states[-1], "Simplified sequence ends elsewhere"
		return seq
