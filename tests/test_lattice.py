import unittest

from stratagem.lattice import (
	ANY, BOOL, INT, STRING, UNIT, PRIMITIVES,
	ClosureType, RefType, consistent_with, join, is_equivalent,
)

SAMPLES = [
	*PRIMITIVES,
	ClosureType(INT, INT),
	ClosureType(INT, BOOL),
	ClosureType(ANY, INT),
	ClosureType(ClosureType(INT, INT), UNIT),
	RefType(INT),
	RefType(ANY),
	RefType(ClosureType(STRING, ANY)),
]

class StructuralEquality(unittest.TestCase):

	def test_composites_compare_by_structure(self):
		self.assertEqual(ClosureType(INT, BOOL), ClosureType(INT, BOOL))
		self.assertEqual(hash(RefType(INT)), hash(RefType(INT)))
		self.assertNotEqual(ClosureType(INT, BOOL), ClosureType(BOOL, INT))
		self.assertNotEqual(RefType(INT), RefType(ANY))
		self.assertTrue(is_equivalent(RefType(RefType(INT)), RefType(RefType(INT))))

	def test_leaves_are_distinct(self):
		for i, a in enumerate(PRIMITIVES):
			for b in PRIMITIVES[i+1:]:
				with self.subTest(a=a, b=b):
					self.assertNotEqual(a, b)

	def test_render(self):
		for expect, typ in [
			("?", ANY),
			("()", UNIT),
			("Int -> Bool", ClosureType(INT, BOOL)),
			("(Int -> Int) -> ?", ClosureType(ClosureType(INT, INT), ANY)),
			("Int -> Int -> Int", ClosureType(INT, ClosureType(INT, INT))),
			("ref String", RefType(STRING)),
			("ref (Int -> ())", RefType(ClosureType(INT, UNIT))),
		]:
			with self.subTest(expect):
				self.assertEqual(expect, str(typ))

class ConsistencyRelation(unittest.TestCase):

	def test_reflexive(self):
		for t in SAMPLES:
			with self.subTest(t=t):
				self.assertTrue(consistent_with(t, t))

	def test_symmetric(self):
		for a in SAMPLES:
			for b in SAMPLES:
				with self.subTest(a=a, b=b):
					self.assertEqual(consistent_with(a, b), consistent_with(b, a))

	def test_any_goes_with_everything(self):
		for t in SAMPLES:
			with self.subTest(t=t):
				self.assertTrue(consistent_with(ANY, t))

	def test_not_transitive(self):
		self.assertTrue(consistent_with(INT, ANY))
		self.assertTrue(consistent_with(ANY, BOOL))
		self.assertFalse(consistent_with(INT, BOOL))

	def test_closures_are_structural(self):
		self.assertTrue(consistent_with(ClosureType(INT, ANY), ClosureType(ANY, BOOL)))
		self.assertTrue(consistent_with(ClosureType(ClosureType(ANY, INT), INT), ClosureType(ClosureType(BOOL, ANY), INT)))
		self.assertFalse(consistent_with(ClosureType(INT, BOOL), ClosureType(INT, INT)))
		self.assertFalse(consistent_with(ClosureType(INT, INT), INT))
		self.assertFalse(consistent_with(ClosureType(INT, INT), RefType(INT)))

	def test_refs_are_invariant(self):
		self.assertTrue(consistent_with(RefType(INT), RefType(INT)))
		self.assertFalse(consistent_with(RefType(INT), RefType(ANY)))
		self.assertFalse(consistent_with(RefType(ANY), RefType(BOOL)))
		self.assertFalse(consistent_with(RefType(ClosureType(INT, ANY)), RefType(ClosureType(INT, INT))))
		self.assertTrue(consistent_with(RefType(INT), ANY))

class Join(unittest.TestCase):

	def test_idempotent(self):
		for t in SAMPLES:
			with self.subTest(t=t):
				self.assertEqual(t, join(t, t))

	def test_commutative(self):
		for a in SAMPLES:
			for b in SAMPLES:
				with self.subTest(a=a, b=b):
					self.assertEqual(join(a, b), join(b, a))

	def test_distinct_leaves_meet_at_any(self):
		self.assertIs(ANY, join(BOOL, UNIT))
		self.assertIs(ANY, join(INT, ANY))
		self.assertIs(ANY, join(STRING, ClosureType(STRING, STRING)))

	def test_closures_join_pointwise(self):
		self.assertEqual(ClosureType(INT, ANY), join(ClosureType(INT, BOOL), ClosureType(INT, STRING)))
		self.assertEqual(ClosureType(ANY, ANY), join(ClosureType(INT, BOOL), ClosureType(BOOL, INT)))

	def test_refs_join_only_when_equal(self):
		self.assertEqual(RefType(INT), join(RefType(INT), RefType(INT)))
		self.assertIs(ANY, join(RefType(INT), RefType(BOOL)))
		self.assertIs(ANY, join(RefType(INT), RefType(ANY)))

	def test_join_is_consistent_with_both_sides(self):
		for a in SAMPLES:
			for b in SAMPLES:
				with self.subTest(a=a, b=b):
					j = join(a, b)
					self.assertTrue(consistent_with(a, j))
					self.assertTrue(consistent_with(b, j))

if __name__ == '__main__':
	unittest.main()
