"""
Complaints about programs, collected and then shown to a person.

The core raises exceptions; it has no opinion about how they look.
A Report is where they go to be turned into something readable.
Each issue is a Pic: an introduction, some annotated excerpts of the program,
and maybe a footer. Annotations underline the guilty expression
within the text of the program it came from.
"""
import sys, random
from typing import Optional
from boozetools.support.failureprone import illustration
from . import syntax
from .errors import (
	StratagemError, ScopeError, TypecheckError, TypeMismatchError,
	CastError, StratagemRuntimeError, InternalRuntimeError,
)

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Hmm. ", "", ""]

	exclamations = [
		'Bother', 'Blast', 'Botheration', 'Confound it', 'Crumbs', 'Dash it all',
		'Egad', 'Fiddle-dee-dee', 'Gadzooks', 'Good Gravy', 'Great Balls of Fire',
		'Heavens', 'Holy Mackerel', 'Jumping Jehoshaphat', 'Leaping Lizards',
		'Nertz', 'Phooey', 'Rats', 'Shucks', 'Thundering Typhoons', 'Zounds',
	]

	resignations = [
		'Something has gone wrong.',
		'That did not go as planned.',
		'I must stop here.',
		'The types and I have had a falling-out.',
		'Here is what I found.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, exclamations, resignations)))

_WINDOW = 72

def _offset_within(context:syntax.Expression, node:syntax.Expression) -> int:
	"""
	Where the text of `node` begins within the text of `context`, following the tree
	so that a repeated bit of text like the second `x` in `(x + x)` lands in the right place.
	Returns -1 if `node` is not part of `context`.
	"""
	if context is node: return 0
	text, cursor = str(context), 0
	for child in context.children():
		child_text = str(child)
		at = text.find(child_text, cursor)
		if at < 0: return -1
		inner = _offset_within(child, node)
		if inner >= 0: return at + inner
		cursor = at + len(child_text)
	return -1

class Annotation:
	"""
	Points at one expression. Without any context, the picture is just
	the expression's own text, underlined. Given the whole program as context,
	the picture shows where in the program that expression sits.
	"""
	caption: str
	def __init__(self, node:syntax.Expression, caption:str="", context:Optional[syntax.Expression]=None):
		self.node = node
		self.caption = caption
		self._text = str(node)
		self._line, self._col = self._text, 0
		if context is not None:
			whole = str(context)
			# A node from outside the tree gets the first textual match.
			at = _offset_within(context, node)
			if at < 0: at = whole.find(self._text)
			if at >= 0: self._line, self._col = whole, at

	@property
	def column(self) -> int: return self._col

	def illustrate(self):
		line, col, width = self._line, self._col, len(self._text)
		if len(line) > _WINDOW:
			# Keep the guilty part in view.
			start = max(0, min(col - 8, len(line) - _WINDOW))
			line, col = line[start:start+_WINDOW], col - start
			width = min(width, _WINDOW - col)
		return illustration(line, col, width, prefix='    | ', caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	def as_text(self):
		lines = [self._intro, ""]
		lines.extend(ann.illustrate() for ann in self._anns)
		lines.extend(self._footer)
		return '\n'.join(lines)

class Report:
	_issues : list[Pic]

	def __init__(self, *, verbose:int=0, max_issues=3):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self) -> tuple[Pic, ...]: return tuple(self._issues)

	def issue(self, it:Pic):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def trace(self, message, site:syntax.Expression):
		if self._verbose > 1:
			print(Annotation(site, message).illustrate(), file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	def _about(self, ex:StratagemError, program, caption:str) -> list[Annotation]:
		if ex.node is None: return []
		return [Annotation(ex.node, caption, program)]

	# Methods the typecheck phase leads to:

	def scope_problem(self, program:syntax.Expression, ex:ScopeError):
		intro = ex.message+"."
		self.issue(Pic(intro, self._about(ex, program, "here")))

	def bad_type(self, program:syntax.Expression, ex:TypecheckError):
		intro = "Type-checking found a problem:"
		if isinstance(ex, TypeMismatchError) and ex.need is not None:
			caption = "This %s needs to be consistent with %s."%(ex.got, ex.need)
		else:
			caption = ex.message
		footer = [ex.message] if caption != ex.message else []
		self.issue(Pic(intro, self._about(ex, program, caption), footer))

	# Methods the evaluation phase leads to:

	def cast_failed(self, program:syntax.Expression, ex:CastError):
		intro = "A run-time type check failed:"
		caption = "Got %s; needed %s."%(ex.runtime_type, ex.target)
		footer = [ex.message, "Dynamically-typed code handed over a value its static context cannot accept."]
		self.issue(Pic(intro, self._about(ex, program, caption), footer))

	def runtime_error(self, program:syntax.Expression, ex:StratagemRuntimeError):
		intro = "The program stopped with an error:"
		self.issue(Pic(intro, self._about(ex, program, ex.message)))

	# Some things for just in case:

	def internal_error(self, program:syntax.Expression, ex:InternalRuntimeError):
		intro = "This is a bug in Stratagem, not in your program."
		footer = [
			ex.message,
			"Type-checking promised one kind of value here, and another turned up.",
		]
		self.issue(Pic(intro, self._about(ex, program, "while evaluating this"), footer))

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
