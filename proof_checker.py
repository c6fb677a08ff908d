"""
Natural Deduction Checker - propositional core
-----------------------------------------------
Features implemented:
- Formula AST: atoms, negation, binary connectives (∧, ∨, →) with
  explicit structural equality
- Lexer + recursive-descent parser:
  ~ ¬, ∧, ∨, -> →, ( ), single uppercase letters as propositions
- Proof state: ordered steps with justification, depth and discharge flag
- Rule engine: MP, CI, CE (L/R), DN, DI (L/R), DS, II
- JSON wire format for formulas, steps and whole proof states
- Scripted sessions (JSON) + CLI report
- Suggestion generator on failure

NOTE:
- Every rule application returns a new ProofState; the state passed in is
  never modified.
- II picks the discharged assumption by rule tag (ASSUME), then by lower id.
  Assumption depth is recorded but scopes are not enforced.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import List, Dict, Optional, Tuple, Any, Iterable, Sequence, Callable
import argparse
import json
import pathlib
import sys

# =========================
# Logic Abstract Syntax
# =========================

class Connective(StrEnum):
    AND = "AND"
    OR = "OR"
    IMPLIES = "IMPLIES"

SYMBOLS: Dict[Connective, str] = {
    Connective.AND: "∧",
    Connective.OR: "∨",
    Connective.IMPLIES: "→",
}

@dataclass(frozen=True)
class Formula:
    """Propositional formula. Closed set of variants: Atom, Not, Binary."""

@dataclass(frozen=True)
class Atom(Formula):
    """Propositional letter P, Q, R, ..."""
    name: str
    def __str__(self) -> str: return self.name

@dataclass(frozen=True)
class Not(Formula):
    inner: Formula
    def __str__(self) -> str:
        # negation chains render without recursing
        count, f = 0, self
        while isinstance(f, Not):
            count, f = count + 1, f.inner
        return "¬" * count + str(f)

@dataclass(frozen=True)
class Binary(Formula):
    connective: Connective
    left: Formula
    right: Formula
    def __str__(self) -> str:
        return f"({self.left} {SYMBOLS[self.connective]} {self.right})"

def conj(left: Formula, right: Formula) -> Binary:
    return Binary(Connective.AND, left, right)

def disj(left: Formula, right: Formula) -> Binary:
    return Binary(Connective.OR, left, right)

def implies(left: Formula, right: Formula) -> Binary:
    return Binary(Connective.IMPLIES, left, right)

def is_binary(f: Formula, connective: Connective) -> bool:
    return isinstance(f, Binary) and f.connective == connective

def formulas_equal(a: Formula, b: Formula) -> bool:
    """Structural equality: same variant and same fields, recursively.

    Left/right order matters; there is no normalization of any kind.
    """
    if isinstance(a, Atom) and isinstance(b, Atom):
        return a.name == b.name
    if isinstance(a, Not) and isinstance(b, Not):
        return formulas_equal(a.inner, b.inner)
    if isinstance(a, Binary) and isinstance(b, Binary):
        return (a.connective == b.connective
                and formulas_equal(a.left, b.left)
                and formulas_equal(a.right, b.right))
    return False

# =========================
# Errors
# =========================

class CheckError(Exception):
    """Base class for every failure reported back to the user."""
    kind: str = "CHECK_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class LexErrorKind(StrEnum):
    UNRECOGNIZED_CHARACTER = "UNRECOGNIZED_CHARACTER"
    INVALID_OPERATOR_SEQUENCE = "INVALID_OPERATOR_SEQUENCE"

class ParseErrorKind(StrEnum):
    UNEXPECTED_TOKEN = "UNEXPECTED_TOKEN"
    MISSING_CLOSE_PAREN = "MISSING_CLOSE_PAREN"
    TRAILING_INPUT = "TRAILING_INPUT"

class RuleErrorKind(StrEnum):
    ARITY_MISMATCH = "ARITY_MISMATCH"
    STEP_NOT_FOUND = "STEP_NOT_FOUND"
    MISSING_SECONDARY_FORMULA = "MISSING_SECONDARY_FORMULA"
    PATTERN_MISMATCH = "PATTERN_MISMATCH"
    UNKNOWN_RULE = "UNKNOWN_RULE"

class LexError(CheckError):
    def __init__(self, kind: LexErrorKind, position: int, character: str):
        if kind == LexErrorKind.INVALID_OPERATOR_SEQUENCE:
            msg = f"Invalid operator '{character}' at position {position}; implication is written '->'."
        else:
            msg = f"Unrecognized character '{character}' at position {position}."
        super().__init__(msg)
        self.kind = kind
        self.position = position
        self.character = character

class ParseError(CheckError):
    def __init__(self, kind: ParseErrorKind, token: "Token"):
        where = f"{token.describe()} at position {token.position}"
        if kind == ParseErrorKind.MISSING_CLOSE_PAREN:
            msg = f"Expected ')' but found {where}."
        elif kind == ParseErrorKind.TRAILING_INPUT:
            msg = f"Unexpected {where} after the end of the formula."
        else:
            msg = f"Unexpected {where}; expected a proposition, '¬' or '('."
        super().__init__(msg)
        self.kind = kind
        self.token = token

class RuleError(CheckError):
    def __init__(self, kind: RuleErrorKind, rule: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.rule = rule

class WireFormatError(CheckError):
    """Malformed JSON payload for a formula, step or proof state."""
    kind = "MALFORMED_PAYLOAD"

# =========================
# Lexer
# =========================

class TokenType(StrEnum):
    PROPOSITION = "PROPOSITION"
    IMPLIES = "IMPLIES"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    EOF = "EOF"

@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    position: int = 0

    def describe(self) -> str:
        if self.type == TokenType.EOF:
            return "end of input"
        return f"'{self.value}'"

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "~": TokenType.NOT,
    "¬": TokenType.NOT,
    "∧": TokenType.AND,
    "∨": TokenType.OR,
    "→": TokenType.IMPLIES,
}

def tokenize(source: str) -> List[Token]:
    """Split formula text into tokens; the result always ends with one EOF."""
    tokens: List[Token] = []
    pos = 0
    while pos < len(source):
        ch = source[pos]
        if ch.isspace():
            pos += 1
            continue
        typ = SINGLE_CHAR_TOKENS.get(ch)
        if typ is not None:
            tokens.append(Token(typ, ch, pos))
            pos += 1
            continue
        if ch == "-":
            if source.startswith("->", pos):
                tokens.append(Token(TokenType.IMPLIES, "->", pos))
                pos += 2
                continue
            raise LexError(LexErrorKind.INVALID_OPERATOR_SEQUENCE, pos, ch)
        # one letter per proposition; "PQ" is two propositions
        if "A" <= ch <= "Z":
            tokens.append(Token(TokenType.PROPOSITION, ch, pos))
            pos += 1
            continue
        raise LexError(LexErrorKind.UNRECOGNIZED_CHARACTER, pos, ch)
    tokens.append(Token(TokenType.EOF, "", len(source)))
    return tokens

# =========================
# Parser
# =========================

class FormulaParser:
    """
    Recursive descent over a token list. Precedence, loosest first:
      implication (right-assoc) < disjunction < conjunction (both left-assoc)
      < unary: ¬ prefix, ( ... ), proposition
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.pos = 0

    def peek(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        end = self.tokens[-1].position + len(self.tokens[-1].value) if self.tokens else 0
        return Token(TokenType.EOF, "", end)

    def advance(self) -> Token:
        t = self.peek()
        self.pos += 1
        return t

    def parse(self) -> Formula:
        f = self._parse_imp()
        if self.peek().type != TokenType.EOF:
            raise ParseError(ParseErrorKind.TRAILING_INPUT, self.peek())
        return f

    def _parse_imp(self) -> Formula:
        left = self._parse_or()
        if self.peek().type == TokenType.IMPLIES:
            self.advance()
            return implies(left, self._parse_imp())
        return left

    def _parse_or(self) -> Formula:
        left = self._parse_and()
        while self.peek().type == TokenType.OR:
            self.advance()
            left = disj(left, self._parse_and())
        return left

    def _parse_and(self) -> Formula:
        left = self._parse_unary()
        while self.peek().type == TokenType.AND:
            self.advance()
            left = conj(left, self._parse_unary())
        return left

    def _parse_unary(self) -> Formula:
        negations = 0
        while self.peek().type == TokenType.NOT:
            self.advance()
            negations += 1
        f = self._parse_primary()
        for _ in range(negations):
            f = Not(f)
        return f

    def _parse_primary(self) -> Formula:
        t = self.peek()
        if t.type == TokenType.LEFT_PAREN:
            self.advance()
            inner = self._parse_imp()
            if self.peek().type != TokenType.RIGHT_PAREN:
                raise ParseError(ParseErrorKind.MISSING_CLOSE_PAREN, self.peek())
            self.advance()
            return inner
        if t.type == TokenType.PROPOSITION:
            self.advance()
            return Atom(t.value)
        raise ParseError(ParseErrorKind.UNEXPECTED_TOKEN, t)

def parse(tokens: Sequence[Token]) -> Formula:
    return FormulaParser(tokens).parse()

def parse_formula(text: str) -> Formula:
    """Tokenize and parse formula text. Raises LexError or ParseError."""
    return parse(tokenize(text))

# =========================
# Proof data structures
# =========================

class RuleName(StrEnum):
    MP = "MP"
    CI = "CI"
    CE_LEFT = "CE_LEFT"
    CE_RIGHT = "CE_RIGHT"
    DN = "DN"
    DI_LEFT = "DI_LEFT"
    DI_RIGHT = "DI_RIGHT"
    DS = "DS"
    II = "II"
    ASSUME = "ASSUME"

@dataclass(frozen=True)
class ProofStep:
    id: int
    formula: Formula
    rule: RuleName
    justification: Tuple[int, ...] = ()
    depth: int = 0
    is_discharged: bool = False

@dataclass(frozen=True)
class ProofState:
    """Immutable proof snapshot; rule application returns a new one."""
    premises: Tuple[ProofStep, ...]
    goal: Optional[Formula]
    current_steps: Tuple[ProofStep, ...]
    next_id: int

def new_proof(premises: Iterable[Formula], goal: Optional[Formula] = None) -> ProofState:
    """Seed a proof: premises become ASSUME steps with ids 1..n."""
    steps = tuple(ProofStep(id=i, formula=f, rule=RuleName.ASSUME)
                  for i, f in enumerate(premises, start=1))
    return ProofState(premises=steps, goal=goal, current_steps=steps, next_id=len(steps) + 1)

def add_assumption(state: ProofState, formula: Formula) -> ProofState:
    step = ProofStep(id=state.next_id, formula=formula, rule=RuleName.ASSUME)
    return replace(state, current_steps=state.current_steps + (step,), next_id=state.next_id + 1)

def set_goal(state: ProofState, goal: Optional[Formula]) -> ProofState:
    return replace(state, goal=goal)

def find_step(state: ProofState, step_id: int) -> Optional[ProofStep]:
    for s in state.current_steps:
        if s.id == step_id:
            return s
    return None

def goal_reached(state: ProofState) -> bool:
    if state.goal is None:
        return False
    return any(formulas_equal(s.formula, state.goal) for s in state.current_steps)

# =========================
# Rule Implementations
# =========================

RULE_TITLES: Dict[RuleName, str] = {
    RuleName.MP: "MP (Modus Ponens)",
    RuleName.CI: "CI (Conjunction Introduction)",
    RuleName.CE_LEFT: "CE_LEFT (Conjunction Elimination)",
    RuleName.CE_RIGHT: "CE_RIGHT (Conjunction Elimination)",
    RuleName.DN: "DN (Double Negation)",
    RuleName.DI_LEFT: "DI_LEFT (Disjunction Introduction)",
    RuleName.DI_RIGHT: "DI_RIGHT (Disjunction Introduction)",
    RuleName.DS: "DS (Disjunctive Syllogism)",
    RuleName.II: "II (Implication Introduction)",
}

RULE_ARITY: Dict[RuleName, int] = {
    RuleName.MP: 2,
    RuleName.CI: 2,
    RuleName.CE_LEFT: 1,
    RuleName.CE_RIGHT: 1,
    RuleName.DN: 1,
    RuleName.DI_LEFT: 1,
    RuleName.DI_RIGHT: 1,
    RuleName.DS: 2,
    RuleName.II: 2,
}

def mismatch(rule: RuleName, expectation: str) -> RuleError:
    return RuleError(RuleErrorKind.PATTERN_MISMATCH, rule, f"{rule}: {expectation}")

def expect(state: ProofState, rule: RuleName, ids: Sequence[int]) -> List[ProofStep]:
    out: List[ProofStep] = []
    for i in ids:
        s = find_step(state, i)
        if s is None:
            raise RuleError(RuleErrorKind.STEP_NOT_FOUND, rule, f"{rule}: step {i} was not found.")
        out.append(s)
    return out

def append_step(state: ProofState, formula: Formula, rule: RuleName, justification: Sequence[int],
                depth: int, steps: Optional[Tuple[ProofStep, ...]] = None) -> ProofState:
    """Copy of `state` with one new step (id = next_id) at the end."""
    base = state.current_steps if steps is None else steps
    new = ProofStep(id=state.next_id, formula=formula, rule=rule,
                    justification=tuple(justification), depth=depth)
    return replace(state, current_steps=base + (new,), next_id=state.next_id + 1)

def rule_mp(state: ProofState, rule: RuleName, steps: List[ProofStep], secondary: Optional[Formula]) -> ProofState:
    p1, p2 = steps
    for imp, ante in ((p1, p2), (p2, p1)):
        if is_binary(imp.formula, Connective.IMPLIES) and formulas_equal(imp.formula.left, ante.formula):
            return append_step(state, imp.formula.right, rule, [p1.id, p2.id], max(p1.depth, p2.depth))
    raise mismatch(rule, "premises must be (A → B) and A.")

def rule_ci(state: ProofState, rule: RuleName, steps: List[ProofStep], secondary: Optional[Formula]) -> ProofState:
    a, b = steps
    return append_step(state, conj(a.formula, b.formula), rule, [a.id, b.id], max(a.depth, b.depth))

def rule_ce(state: ProofState, rule: RuleName, steps: List[ProofStep], secondary: Optional[Formula]) -> ProofState:
    (p,) = steps
    f = p.formula
    if not is_binary(f, Connective.AND):
        raise mismatch(rule, "the premise must be a conjunction (A ∧ B).")
    concl = f.left if rule == RuleName.CE_LEFT else f.right
    return append_step(state, concl, rule, [p.id], p.depth)

def rule_dn(state: ProofState, rule: RuleName, steps: List[ProofStep], secondary: Optional[Formula]) -> ProofState:
    (p,) = steps
    f = p.formula
    if not (isinstance(f, Not) and isinstance(f.inner, Not)):
        raise mismatch(rule, "the premise must be a double negation (¬¬A).")
    return append_step(state, f.inner.inner, rule, [p.id], p.depth)

def rule_di(state: ProofState, rule: RuleName, steps: List[ProofStep], secondary: Optional[Formula]) -> ProofState:
    (p,) = steps
    if rule == RuleName.DI_LEFT:
        concl = disj(p.formula, secondary)
    else:
        concl = disj(secondary, p.formula)
    return append_step(state, concl, rule, [p.id], p.depth)

def rule_ds(state: ProofState, rule: RuleName, steps: List[ProofStep], secondary: Optional[Formula]) -> ProofState:
    p1, p2 = steps
    for d, n in ((p1.formula, p2.formula), (p2.formula, p1.formula)):
        if not (is_binary(d, Connective.OR) and isinstance(n, Not)):
            continue
        if formulas_equal(d.left, n.inner):
            return append_step(state, d.right, rule, [p1.id, p2.id], max(p1.depth, p2.depth))
        if formulas_equal(d.right, n.inner):
            return append_step(state, d.left, rule, [p1.id, p2.id], max(p1.depth, p2.depth))
    raise mismatch(rule, "premises must be (A ∨ B) and either ¬A or ¬B.")

def choose_assumption(a: ProofStep, b: ProofStep) -> Tuple[ProofStep, ProofStep]:
    """Return (assumption, conclusion) for II.

    The single ASSUME-tagged step wins; when both or neither are tagged the
    lower id is the assumption.
    """
    a_assumed = a.rule == RuleName.ASSUME
    b_assumed = b.rule == RuleName.ASSUME
    if a_assumed and not b_assumed:
        return a, b
    if b_assumed and not a_assumed:
        return b, a
    return (a, b) if a.id < b.id else (b, a)

def rule_ii(state: ProofState, rule: RuleName, steps: List[ProofStep], secondary: Optional[Formula]) -> ProofState:
    assumption, conclusion = choose_assumption(*steps)
    discharged = tuple(replace(s, is_discharged=True) if s.id == assumption.id else s
                       for s in state.current_steps)
    return append_step(state, implies(assumption.formula, conclusion.formula), rule,
                       [assumption.id, conclusion.id], 0, steps=discharged)

RuleFn = Callable[[ProofState, RuleName, List[ProofStep], Optional[Formula]], ProofState]

RULES: Dict[RuleName, RuleFn] = {
    RuleName.MP: rule_mp,
    RuleName.CI: rule_ci,
    RuleName.CE_LEFT: rule_ce,
    RuleName.CE_RIGHT: rule_ce,
    RuleName.DN: rule_dn,
    RuleName.DI_LEFT: rule_di,
    RuleName.DI_RIGHT: rule_di,
    RuleName.DS: rule_ds,
    RuleName.II: rule_ii,
}

def apply_rule(state: ProofState, rule: str, selected_step_ids: Sequence[int],
               secondary: Optional[Formula] = None) -> ProofState:
    """Apply one inference rule and return the resulting proof state.

    Raises RuleError when the rule is unknown, the number of selected steps
    is wrong, a DI rule has no secondary formula, a selected id does not
    exist, or the selected formulas do not have the shape the rule needs.
    """
    try:
        name = RuleName(rule)
    except ValueError:
        raise RuleError(RuleErrorKind.UNKNOWN_RULE, str(rule), f"Unknown rule '{rule}'.") from None
    if name not in RULES:
        raise RuleError(RuleErrorKind.UNKNOWN_RULE, name,
                        f"{name} is not an inference rule; add assumptions directly.")

    ids = list(selected_step_ids)
    arity = RULE_ARITY[name]
    if len(ids) != arity:
        noun = "step" if arity == 1 else "steps"
        raise RuleError(RuleErrorKind.ARITY_MISMATCH, name,
                        f"{RULE_TITLES[name]} requires exactly {arity} selected {noun}, got {len(ids)}.")
    if name in (RuleName.DI_LEFT, RuleName.DI_RIGHT) and secondary is None:
        raise RuleError(RuleErrorKind.MISSING_SECONDARY_FORMULA, name,
                        f"{name}: a secondary formula (Q) must be provided.")
    steps = expect(state, name, ids)
    return RULES[name](state, name, steps, secondary)

# =========================
# Suggestions on failure
# =========================

RULE_HINTS: Dict[str, str] = {
    RuleName.MP: "Select an implication (A → B) together with its antecedent A.",
    RuleName.CI: "Select the two formulas to join; the first selected becomes the left conjunct.",
    RuleName.CE_LEFT: "Select a single conjunction (A ∧ B).",
    RuleName.CE_RIGHT: "Select a single conjunction (A ∧ B).",
    RuleName.DN: "Select a single double negation ¬¬A.",
    RuleName.DI_LEFT: "Select one formula and enter the other disjunct Q.",
    RuleName.DI_RIGHT: "Select one formula and enter the other disjunct Q.",
    RuleName.DS: "Select a disjunction (A ∨ B) and the negation of one of its disjuncts.",
    RuleName.II: "Select the assumption A and a step B derived from it to conclude A → B.",
}

def suggest_on_failure(err: CheckError) -> str:
    if isinstance(err, (LexError, ParseError)):
        return "Use single uppercase letters, ¬ or ~, ∧, ∨, → or ->, and balanced parentheses."
    if isinstance(err, WireFormatError):
        return "Send the proof state exactly as the server returned it."
    if isinstance(err, RuleError):
        if err.kind == RuleErrorKind.STEP_NOT_FOUND:
            return "Select steps that are part of the current proof."
        if err.kind == RuleErrorKind.UNKNOWN_RULE:
            return "Pick one of: " + ", ".join(RULES) + "."
        if err.kind == RuleErrorKind.MISSING_SECONDARY_FORMULA:
            return "Enter the formula Q to add as the other disjunct."
        hint = RULE_HINTS.get(err.rule)
        if hint:
            return hint
    return "Re-check rule name, selected steps and formulas."

# =========================
# Wire format (JSON)
# =========================

def formula_to_json(f: Formula) -> Dict[str, Any]:
    if isinstance(f, Atom):
        return {"type": "ATOM", "name": f.name}
    if isinstance(f, Not):
        return {"type": "NOT", "formula": formula_to_json(f.inner)}
    if isinstance(f, Binary):
        return {"type": "BINARY", "connective": str(f.connective),
                "left": formula_to_json(f.left), "right": formula_to_json(f.right)}
    raise TypeError(f"not a formula: {f!r}")

def formula_from_json(obj: Any) -> Formula:
    if not isinstance(obj, dict):
        raise WireFormatError("Formula must be a JSON object.")
    t = obj.get("type")
    if t == "ATOM":
        name = obj.get("name")
        if not isinstance(name, str) or not name:
            raise WireFormatError("ATOM formula needs a non-empty 'name'.")
        return Atom(name)
    if t == "NOT":
        return Not(formula_from_json(obj.get("formula")))
    if t == "BINARY":
        conn = obj.get("connective")
        if not isinstance(conn, str) or conn not in Connective.__members__:
            raise WireFormatError(f"Unknown connective {conn!r}.")
        return Binary(Connective(conn), formula_from_json(obj.get("left")), formula_from_json(obj.get("right")))
    raise WireFormatError(f"Unknown formula type {t!r}.")

def _int_field(obj: Dict[str, Any], key: str, where: str) -> int:
    v = obj.get(key)
    # bool is an int subclass; reject it explicitly
    if not isinstance(v, int) or isinstance(v, bool):
        raise WireFormatError(f"{where}: '{key}' must be an integer.")
    return v

def step_to_json(s: ProofStep) -> Dict[str, Any]:
    return {
        "id": s.id,
        "formula": formula_to_json(s.formula),
        "rule": str(s.rule),
        "justification": list(s.justification),
        "depth": s.depth,
        "isDischarged": s.is_discharged,
    }

def step_from_json(obj: Any) -> ProofStep:
    if not isinstance(obj, dict):
        raise WireFormatError("Proof step must be a JSON object.")
    sid = _int_field(obj, "id", "step")
    where = f"step {sid}"
    rule = obj.get("rule")
    if not isinstance(rule, str) or rule not in RuleName.__members__:
        raise WireFormatError(f"{where}: unknown rule {rule!r}.")
    just = obj.get("justification", [])
    if not isinstance(just, list) or any(not isinstance(j, int) or isinstance(j, bool) for j in just):
        raise WireFormatError(f"{where}: 'justification' must be a list of integers.")
    depth = _int_field(obj, "depth", where) if "depth" in obj else 0
    if depth < 0:
        raise WireFormatError(f"{where}: 'depth' must not be negative.")
    discharged = obj.get("isDischarged", False)
    if not isinstance(discharged, bool):
        raise WireFormatError(f"{where}: 'isDischarged' must be a boolean.")
    return ProofStep(id=sid, formula=formula_from_json(obj.get("formula")), rule=RuleName(rule),
                     justification=tuple(just), depth=depth, is_discharged=discharged)

def state_to_json(state: ProofState) -> Dict[str, Any]:
    return {
        "premises": [step_to_json(s) for s in state.premises],
        "goal": formula_to_json(state.goal) if state.goal is not None else None,
        "currentSteps": [step_to_json(s) for s in state.current_steps],
        "nextId": state.next_id,
    }

def state_from_json(obj: Any) -> ProofState:
    if not isinstance(obj, dict):
        raise WireFormatError("Proof state must be a JSON object.")
    premises = obj.get("premises", [])
    current = obj.get("currentSteps")
    if not isinstance(premises, list) or not isinstance(current, list):
        raise WireFormatError("'premises' and 'currentSteps' must be lists.")
    steps = tuple(step_from_json(s) for s in current)
    next_id = _int_field(obj, "nextId", "state")
    ids = [s.id for s in steps]
    if len(set(ids)) != len(ids):
        raise WireFormatError("Step ids must be unique.")
    if ids and next_id <= max(ids):
        raise WireFormatError(f"'nextId' ({next_id}) must exceed every step id.")
    goal = obj.get("goal")
    return ProofState(
        premises=tuple(step_from_json(s) for s in premises),
        goal=formula_from_json(goal) if goal is not None else None,
        current_steps=steps,
        next_id=next_id,
    )

# =========================
# Verification runner
# =========================

def _script_formula(raw: Dict[str, Any], key: str, index: int) -> Formula:
    text = raw.get(key)
    if not isinstance(text, str) or not text.strip():
        raise WireFormatError(f"Step {index} needs a '{key}' formula.")
    return parse_formula(text)

def _script_step_ids(raw: Dict[str, Any], index: int) -> List[int]:
    ids = raw.get("use", [])
    if not isinstance(ids, list) or any(not isinstance(i, int) or isinstance(i, bool) for i in ids):
        raise WireFormatError(f"Step {index} needs a 'use' list of step ids.")
    return ids

def run_session(script: Dict[str, Any]) -> Dict[str, Any]:
    """Replay a scripted proof and report each step.

    script = {"premises": [...], "goal": "...", "steps": [{"rule", "use", "with"|"formula"}]}
    Premise and goal text must parse; failing steps are reported and skipped.
    """
    premises = [parse_formula(p) for p in script.get("premises", [])]
    goal_s = script.get("goal")
    goal = parse_formula(goal_s) if goal_s else None
    state = new_proof(premises, goal)

    messages: List[str] = [f"[PREMISE] {s.id}: {s.formula}" for s in state.current_steps]
    results: List[Dict[str, Any]] = []

    for index, raw in enumerate(script.get("steps", []), start=1):
        rule = str(raw.get("rule", "")).strip().upper() if isinstance(raw, dict) else ""
        try:
            if not isinstance(raw, dict):
                raise WireFormatError(f"Step {index} must be a JSON object.")
            if rule == RuleName.ASSUME:
                state = add_assumption(state, _script_formula(raw, "formula", index))
            else:
                secondary = _script_formula(raw, "with", index) if raw.get("with") else None
                state = apply_rule(state, rule, _script_step_ids(raw, index), secondary)
            step = state.current_steps[-1]
            messages.append(f"[OK] {step.id}: {rule} ⟹ {step.formula}")
            results.append({"index": index, "ok": True, "id": step.id, "rule": rule,
                            "conclusion": str(step.formula)})
        except CheckError as e:
            messages.append(f"[ERR] step {index} ({rule}): {e}")
            results.append({"index": index, "ok": False, "rule": rule, "kind": str(e.kind),
                            "error": str(e), "suggestion": suggest_on_failure(e)})

    return {
        "ok": goal_reached(state),
        "goal": str(goal) if goal is not None else None,
        "results": results,
        "log": messages,
        "state": state_to_json(state),
    }

# =========================
# Demo & CLI
# =========================

DEMO = {
    "premises": ["P -> Q", "Q -> R", "P ∧ S"],
    "goal": "R ∨ T",
    "steps": [
        {"rule": "CE_LEFT", "use": [3]},
        {"rule": "MP", "use": [1, 4]},
        {"rule": "MP", "use": [5, 2]},
        {"rule": "DI_LEFT", "use": [6], "with": "T"},
    ],
}

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proof-checker",
        description="Replay a scripted natural deduction proof and print a JSON report. "
                    "Exit status: 0 goal reached, 1 goal not reached, 2 unreadable script.",
    )
    parser.add_argument("script", nargs="?",
                        help="JSON file with premises, goal and steps (default: built-in demo)")
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.script is None:
        script = DEMO
    else:
        path = pathlib.Path(args.script)
        try:
            script = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            print(f"proof-checker: cannot read {path}: {e.strerror}", file=sys.stderr)
            return 2
        except json.JSONDecodeError as e:
            print(f"proof-checker: {path} is not valid JSON: {e}", file=sys.stderr)
            return 2
    if not isinstance(script, dict):
        print("proof-checker: the script must be a JSON object", file=sys.stderr)
        return 2
    try:
        out = run_session(script)
    except CheckError as e:
        print(f"proof-checker: {e}", file=sys.stderr)
        return 2
    print(json.dumps(out, ensure_ascii=False, indent=2))
    return 0 if out["ok"] else 1

if __name__ == "__main__":
    sys.exit(main())
