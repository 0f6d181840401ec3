import logging
import multiprocessing

import numpy as np


from cubes import Rubik_3x3x3
from solvers import LayerSolver



## Metrics for solver evaluation ###################################################################


class SolveMetric:
	"""
	Generates `samples` starting states scrambled by `scramblingMoves` turns,
	measures how often the solver reaches the solved state and how many turns it needs.
	"""

	def __init__(self, scramblingMoves, samples=100, seqLength=1000, threads=1, seed=None):
		self.scramblingMoves = scramblingMoves
		self.samples = samples
		self.seqLength = seqLength
		self.threads = threads
		self.seed = seed

	def __call__(self, solver):
		"""
		Returns (success rate, mean number of turns of the solved runs)
		"""
		rng = np.random.default_rng(self.seed)

		if self.threads > 1:
			threadSamples = (self.samples+self.threads-1) // self.threads
			worker = _SolveWorker(solver, threadSamples, self.scramblingMoves, self.seqLength)
			seeds = [rng.integers(0x7FFFFFFFFFFFFFFF) for _ in range(self.threads)]
			with multiprocessing.Pool(self.threads) as pool:
				lengths = sum(pool.map(worker, seeds), [])
			total = self.threads*threadSamples

		else:
			worker = _SolveWorker(solver, self.samples, self.scramblingMoves, self.seqLength)
			lengths = worker(rng.integers(0x7FFFFFFFFFFFFFFF))
			total = self.samples

		meanLength = float(np.mean(lengths)) if lengths else float("nan")
		return len(lengths) / total, meanLength


class _SolveWorker:
	"""
	A multiprocessing worker to parallelize `SolveMetric`.
	Returns the simplified sequence lengths of the solved runs.
	"""

	def __init__(self, solver, numSamples, scramblingMoves, seqLength):
		self.solver = solver
		self.numSamples = numSamples
		self.scramblingMoves = scramblingMoves
		self.seqLength = seqLength

	def __call__(self, seed=None):
		rng = np.random.default_rng(seed)
		lengths = []
		for seqInd in range(self.numSamples):
			seq = self.solver.generateSequence(
				numMoves = self.seqLength,
				scrambleMoves = self.scramblingMoves,
				seed = rng.integers(0x7FFFFFFFFFFFFFFF),
			)
			if seq.isSolved():
				lengths.append(len(seq.simplify()))
		return lengths



## Experiments #####################################################################################


randomSeed = 1
scramblingMoves = 30
samples = 200
threads = 1


def main():
	logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

	print(f"\nrandom seed = {randomSeed}")
	rng = np.random.default_rng(randomSeed)

	cube = Rubik_3x3x3()
	solver = LayerSolver(cube, seed=rng.integers(0x7FFFFFFFFFFFFFFF))
	print("\ncube:", cube)
	print("solver:", solver)


	## A single solve, turn by turn ############################

	seq = solver.generateSequence(scrambleMoves=scramblingMoves)
	seq.check()
	print(f"\nsolved: {seq.isSolved()}, {len(seq)} turns, {len(seq.simplify())} after simplifying")
	print(seq.simplify().toNotation())


	## Success rate ############################################

	metric = SolveMetric(scramblingMoves, samples, threads=threads,
	                     seed=rng.integers(0x7FFFFFFFFFFFFFFF))
	successRate, meanLength = metric(solver)
	print(f"\nsuccess rate: {successRate}")
	print(f"mean solution length: {meanLength:.1f}")


if __name__ == "__main__":
	main()
