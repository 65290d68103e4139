"""
Overall control: typecheck the program, then run what the typechecker made of it.
Anything that goes wrong lands in the Report rather than flying out of here.
"""
from typing import NamedTuple, Optional
from . import syntax
from .checker import Checked, typecheck
from .diagnostics import Report
from .errors import (
	ScopeError, TypecheckError,
	CastError, StratagemRuntimeError, InternalRuntimeError,
)
from .evaluator import evaluate
from .lattice import StratagemType
from .values import VALUE, display

class Outcome(NamedTuple):
	static_type: StratagemType
	value: VALUE

def check_program(program:syntax.Expression, report:Report) -> Optional[Checked]:
	report.info("Type-checking.")
	try: checked = typecheck(program)
	except ScopeError as ex: report.scope_problem(program, ex)
	except TypecheckError as ex: report.bad_type(program, ex)
	else:
		casts = list(syntax.each_cast(checked.expr))
		report.info("Program has type %s; inserted %d cast(s)."%(checked.type, len(casts)))
		for cast in casts: report.trace("checked at run time", cast)
		return checked

def run_program(program:syntax.Expression, report:Report) -> Optional[Outcome]:
	checked = check_program(program, report)
	if checked is None: return
	report.info("Evaluating.")
	try: value = evaluate(checked.expr)
	except CastError as ex: report.cast_failed(checked.expr, ex)
	except InternalRuntimeError as ex: report.internal_error(checked.expr, ex)
	except StratagemRuntimeError as ex: report.runtime_error(checked.expr, ex)
	else:
		report.info("Result:", display(value))
		return Outcome(checked.type, value)
