"""
The set of expression nodes.
An upstream front-end calls these constructors bottom-up with fully-resolved types.
The typechecker builds new nodes from old ones as it inserts casts;
Cast nodes themselves never come from the front-end.
Class-level type annotations make peace with the IDE wherever typechecking fills in fields.
"""
from typing import Optional, Sequence
from .lattice import StratagemType
from .values import VALUE, display
from . import primitive

class Expression:
	def children(self) -> Sequence["Expression"]:
		raise NotImplementedError(type(self))
	def __repr__(self): return "<%s %s>"%(type(self).__name__, self)

class Literal(Expression):
	def __init__(self, value:VALUE):
		self.value = value
	def children(self): return ()
	def __str__(self):
		if isinstance(self.value, str): return '"%s"'%self.value
		return display(self.value)

class Var(Expression):
	def __init__(self, name:str):
		assert isinstance(name, str), name
		self.name = name
	def children(self): return ()
	def __str__(self): return self.name

class BinOp(Expression):
	def __init__(self, op:str, lhs:Expression, rhs:Expression):
		assert op in primitive.GLYPHS, op
		self.op, self.lhs, self.rhs = op, lhs, rhs
	def children(self): return self.lhs, self.rhs
	def __str__(self): return "(%s %s %s)"%(self.lhs, self.op, self.rhs)

class If(Expression):
	def __init__(self, if_part:Expression, then_part:Expression, else_part:Expression):
		self.if_part, self.then_part, self.else_part = if_part, then_part, else_part
	def children(self): return self.if_part, self.then_part, self.else_part
	def __str__(self): return "if %s { %s } else { %s }"%(self.if_part, self.then_part, self.else_part)

class FunctionDecl(Expression):
	return_type: Optional[StratagemType]  # Typecheck fixes this.
	def __init__(
			self,
			param_name:str,
			param_type:StratagemType,
			declared_return_type:Optional[StratagemType],
			body:Expression,
			return_type:Optional[StratagemType]=None,
	):
		assert isinstance(param_type, StratagemType), param_type
		self.param_name = param_name
		self.param_type = param_type
		self.declared_return_type = declared_return_type
		self.body = body
		self.return_type = return_type
	def children(self): return self.body,
	def __str__(self):
		ret_type = self.return_type or self.declared_return_type
		ret = "" if ret_type is None else ": %s"%ret_type
		return "fn(%s: %s)%s { %s }"%(self.param_name, self.param_type, ret, self.body)

class FunctionApp(Expression):
	def __init__(self, callee:Expression, arg:Expression):
		self.callee, self.arg = callee, arg
	def children(self): return self.callee, self.arg
	def __str__(self):
		callee = str(self.callee)
		if isinstance(self.callee, (FunctionDecl, Let)): callee = "(%s)"%callee
		return "%s(%s)"%(callee, self.arg)

class Seq(Expression):
	def __init__(self, exprs:Sequence[Expression]):
		self.exprs = tuple(exprs)
	def children(self): return self.exprs
	def __str__(self): return "; ".join(map(str, self.exprs)) or "()"

class Assign(Expression):
	def __init__(self, ref_expr:Expression, value_expr:Expression):
		self.ref_expr, self.value_expr = ref_expr, value_expr
	def children(self): return self.ref_expr, self.value_expr
	def __str__(self): return "%s := %s"%(self.ref_expr, self.value_expr)

class Deref(Expression):
	def __init__(self, ref_expr:Expression):
		self.ref_expr = ref_expr
	def children(self): return self.ref_expr,
	def __str__(self): return "!%s"%(self.ref_expr,)

class Ref(Expression):
	cell_type: Optional[StratagemType]  # Typecheck fills this in.
	def __init__(self, value_expr:Expression, cell_type:Optional[StratagemType]=None):
		self.value_expr = value_expr
		self.cell_type = cell_type
	def children(self): return self.value_expr,
	def __str__(self): return "ref %s"%(self.value_expr,)

class Print(Expression):
	def __init__(self, arg:Expression):
		self.arg = arg
	def children(self): return self.arg,
	def __str__(self): return "print(%s)"%(self.arg,)

class Cast(Expression):
	""" Only the typechecker makes these. Each one schedules a run-time check. """
	def __init__(self, target:StratagemType, body:Expression):
		assert isinstance(target, StratagemType), target
		self.target, self.body = target, body
	def children(self): return self.body,
	def __str__(self): return "<%s>(%s)"%(self.target, self.body)

class Let(Expression):
	"""
	Binds one name for the duration of the body, in a scope of its own.
	Without a declared type, the name takes the type of its value.
	"""
	def __init__(self, name:str, declared_type:Optional[StratagemType], value:Expression, body:Expression):
		self.name = name
		self.declared_type = declared_type
		self.value = value
		self.body = body
	def children(self): return self.value, self.body
	def __str__(self):
		ann = "" if self.declared_type is None else ": %s"%self.declared_type
		return "let %s%s = %s; %s"%(self.name, ann, self.value, self.body)

###############################################################################

def each_cast(expr:Expression):
	""" Every Cast node in the tree, outermost first. """
	agenda = [expr]
	while agenda:
		node = agenda.pop()
		if isinstance(node, Cast): yield node
		agenda.extend(reversed(node.children()))
