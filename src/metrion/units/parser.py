from functools import lru_cache
from typing import Tuple, Union

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metrion.core.unit import Unit
    from metrion.units.registry import UnitsRegistry

# --- Plan node types ------------------------------------------------
# ("name", <str>)
# ("one", None)
# ("pow", <plan>, <int>)
# ("mul", <plan>, <plan>)
# ("div", <plan>, <plan>)
Plan = Tuple[str, Union[str, int, "Plan", None], Union[int, "Plan", None]]

_SUPERSCRIPT_DIGITS = {ch: str(i) for i, ch in enumerate("⁰¹²³⁴⁵⁶⁷⁸⁹")}
_SUPERSCRIPT_SIGNS = {"⁻": "-", "⁺": "+"}
_MUL_TOKENS = ("*", "·", "⋅")


# ---------------- Parser that builds a PLAN (no registry lookups!) ----------------
class _UnitExprParser:
    """
    Grammar (no numbers except the literal 1 and signed integer exponents):
      expr   := term (('*' | '·' | '/') term)*
      term   := factor [('**' | '^') exponent | superscript_int]?
      factor := NAME | '1' | '(' expr ')'
      NAME   := letter (letter | digit | '_')*
      exponent := signed_int | '(' signed_int ')'
    """
    def __init__(self, text: str):
        self.s = text
        self.n = len(text)
        self.i = 0

    def parse(self) -> Plan:
        plan = self._parse_expr()
        self._skip_ws()
        if self.i != self.n:
            raise ValueError(f"Unexpected trailing input at {self.i}: {self.s[self.i:self.i+10]!r}")
        return plan

    # expr := term (('*' | '·' | '/') term)*
    def _parse_expr(self) -> Plan:
        left = self._parse_term()
        while True:
            self._skip_ws()
            tok = self._peek_mul()
            if tok:
                self._eat(tok)
                right = self._parse_term()
                left = ("mul", left, right)
            elif self._peek('/'):
                self._eat('/')
                right = self._parse_term()
                left = ("div", left, right)
            else:
                break
        return left

    # term := factor [('**' | '^') exponent | superscript_int]?
    def _parse_term(self) -> Plan:
        base = self._parse_factor()
        self._skip_ws()
        if self._peek('**') or self._peek('^'):
            self._eat('**' if self._peek('**') else '^')
            exp = self._parse_exponent()
            base = ("pow", base, exp)
        elif self._peek_superscript():
            base = ("pow", base, self._parse_superscript_int())
        return base

    # factor := NAME | '1' | '(' expr ')'
    def _parse_factor(self) -> Plan:
        self._skip_ws()
        if self._peek('('):
            self._eat('(')
            val = self._parse_expr()
            self._skip_ws()
            self._eat(')')
            return val
        if self._peek('1'):
            self._eat('1')
            return ("one", None, None)
        name = self._parse_name()
        if not name:
            ch = self.s[self.i:self.i+1]
            raise ValueError(f"Expected unit name or '(' at {self.i}, got {ch!r}")
        return ("name", name, None)

    # ---- token helpers ----
    def _parse_name(self):
        self._skip_ws()
        i0 = self.i
        if i0 < self.n and (self.s[i0].isalpha() or self.s[i0] == '_'):
            self.i += 1
            while self.i < self.n and (self.s[self.i].isalnum() or self.s[self.i] == '_') \
                    and self.s[self.i] not in _SUPERSCRIPT_DIGITS:
                self.i += 1
            return self.s[i0:self.i]
        return None

    def _parse_exponent(self) -> int:
        self._skip_ws()
        if self._peek('('):
            self._eat('(')
            exp = self._parse_signed_int()
            self._eat(')')
            return exp
        return self._parse_signed_int()

    def _parse_signed_int(self) -> int:
        self._skip_ws()
        i0 = self.i
        if self.i < self.n and self.s[self.i] in '+-':
            self.i += 1
        i1 = self.i
        while self.i < self.n and self.s[self.i].isdigit() and self.s[self.i] not in _SUPERSCRIPT_DIGITS:
            self.i += 1
        if i1 == self.i:
            raise ValueError(f"Expected integer exponent at {self.i}")
        return int(self.s[i0:self.i])

    def _peek_superscript(self) -> bool:
        return self.i < self.n and (
            self.s[self.i] in _SUPERSCRIPT_DIGITS or self.s[self.i] in _SUPERSCRIPT_SIGNS
        )

    def _parse_superscript_int(self) -> int:
        digits = ""
        if self.s[self.i] in _SUPERSCRIPT_SIGNS:
            digits = _SUPERSCRIPT_SIGNS[self.s[self.i]]
            self.i += 1
        i1 = self.i
        while self.i < self.n and self.s[self.i] in _SUPERSCRIPT_DIGITS:
            digits += _SUPERSCRIPT_DIGITS[self.s[self.i]]
            self.i += 1
        if i1 == self.i:
            raise ValueError(f"Expected superscript digits at {self.i}")
        return int(digits)

    def _skip_ws(self):
        s, n, i = self.s, self.n, self.i
        while i < n and s[i].isspace():
            i += 1
        self.i = i

    def _peek_mul(self) -> str:
        self._skip_ws()
        for tok in _MUL_TOKENS:
            if self.s[self.i:self.i+len(tok)] == tok and not self._peek('**'):
                return tok
        return ""

    def _peek(self, tok: str) -> bool:
        self._skip_ws()
        return self.s[self.i:self.i+len(tok)] == tok

    def _eat(self, tok: str):
        if not self._peek(tok):
            got = self.s[self.i:self.i+len(tok)]
            raise ValueError(f"Expected {tok!r} at {self.i}, got {got!r}")
        self.i += len(tok)


# ---------------- Evaluation of a plan against a given registry ----------------
def _eval_plan(plan: Plan, reg: "UnitsRegistry") -> "Unit":
    kind = plan[0]
    if kind == "name":
        name = plan[1]
        try:
            return reg.get(name)  # late binding to the provided registry
        except ValueError as e:
            raise ValueError(f"Unknown unit '{name}': {e}") from None
    elif kind == "one":
        from metrion.core.unit import UNITLESS
        return UNITLESS
    elif kind == "pow":
        base = _eval_plan(plan[1], reg)
        exp = plan[2]  # int
        return base ** exp
    elif kind == "mul":
        left = _eval_plan(plan[1], reg)
        right = _eval_plan(plan[2], reg)
        return left * right
    elif kind == "div":
        left = _eval_plan(plan[1], reg)
        right = _eval_plan(plan[2], reg)
        return left / right
    else:
        raise RuntimeError(f"Invalid plan node: {plan!r}")


# ---------------- Public API with caching-safe compilation ----------------
# Cache the *compiled plan* only. Safe across registries because there's no bound objects inside.
@lru_cache(maxsize=4096)
def _compile_unit_expr(expr: str) -> Plan:
    # cheap prefilter; the parser reports positions for anything subtler
    disallowed = set('~!@#$%&|=,:;?<>\'\"`\\[]{}')
    if any(c in disallowed for c in expr):
        raise ValueError(
            "Only *, ·, /, ** or ^, parentheses, unit names, and signed integer exponents are allowed."
        )
    return _UnitExprParser(expr).parse()


def is_unit_expr(expr: str) -> bool:
    """True when ``expr`` is a compound expression rather than a single symbol."""
    return (
        any(op in expr for op in ('*', '/', '^', '(', *_MUL_TOKENS))
        or any(ch in _SUPERSCRIPT_DIGITS for ch in expr)
        or expr.strip() == "1"
    )


def extract_unit_expr(expr: str, reg: "UnitsRegistry") -> "Unit":
    """
    Parser for unit expressions like 'kg*m/(nF**2 * s**2)' or 'kg·m/s²'.

    Caching-safety:
      * We cache a compiled syntax plan keyed by `expr` only (no registry state).
      * Evaluation binds names to units from the *provided* `reg` at call time.

    Allowed syntax:
      * Operators: '*' or '·', '/', '**' or '^' with integer (optionally signed)
        exponents, and Unicode superscript exponents ('s²', 'm⁻¹').
      * Parentheses, the literal '1' (as in '1/s'), and unit names.
      * Anything else raises ValueError.
    """
    plan = _compile_unit_expr(expr)
    return _eval_plan(plan, reg)
