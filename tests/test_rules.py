import unittest

from proof_checker import (
    Atom, Not, conj, disj, implies, parse_formula,
    ProofStep, ProofState, RuleName, new_proof, add_assumption, set_goal,
    find_step, goal_reached, apply_rule, choose_assumption, suggest_on_failure,
    RuleError, RuleErrorKind,
)

P, Q, R = Atom("P"), Atom("Q"), Atom("R")


def proof(*texts, goal=None):
    """Proof state whose premises are the parsed texts (ids 1..n)."""
    return new_proof([parse_formula(t) for t in texts], parse_formula(goal) if goal else None)


class RuleTestCase(unittest.TestCase):

    def assert_rule_error(self, kind, state, rule, ids, secondary=None):
        with self.assertRaises(RuleError) as cm:
            apply_rule(state, rule, ids, secondary)
        self.assertEqual(cm.exception.kind, kind)
        return cm.exception

    def last(self, state):
        return state.current_steps[-1]


class TestProofState(RuleTestCase):

    def test_new_proof_seeds_assumed_premises(self):
        state = proof("P -> Q", "P", goal="Q")
        self.assertEqual(state.next_id, 3)
        self.assertEqual(state.premises, state.current_steps)
        for i, step in enumerate(state.current_steps, start=1):
            self.assertEqual(step.id, i)
            self.assertEqual(step.rule, RuleName.ASSUME)
            self.assertEqual(step.justification, ())
            self.assertEqual(step.depth, 0)
            self.assertFalse(step.is_discharged)

    def test_add_assumption(self):
        state = proof("P")
        after = add_assumption(state, Q)
        self.assertEqual(len(state.current_steps), 1)
        self.assertEqual(self.last(after), ProofStep(id=2, formula=Q, rule=RuleName.ASSUME))
        self.assertEqual(after.next_id, 3)
        self.assertEqual(after.premises, state.premises)

    def test_goal_reached(self):
        state = proof("P -> Q", "P")
        self.assertFalse(goal_reached(state))
        state = set_goal(state, Q)
        self.assertFalse(goal_reached(state))
        self.assertTrue(goal_reached(apply_rule(state, RuleName.MP, [1, 2])))

    def test_find_step(self):
        state = proof("P", "Q")
        self.assertEqual(find_step(state, 2).formula, Q)
        self.assertIsNone(find_step(state, 9))


class TestModusPonens(RuleTestCase):

    def test_derives_consequent(self):
        state = proof("P -> Q", "P")
        after = apply_rule(state, RuleName.MP, [1, 2])
        self.assertEqual(self.last(after), ProofStep(id=3, formula=Q, rule=RuleName.MP, justification=(1, 2), depth=0))

    def test_order_independent(self):
        state = proof("P -> Q", "P")
        a = apply_rule(state, RuleName.MP, [1, 2])
        b = apply_rule(state, RuleName.MP, [2, 1])
        self.assertEqual(self.last(a).formula, self.last(b).formula)
        self.assertEqual(a.current_steps[:-1], b.current_steps[:-1])
        self.assertEqual(a.next_id, b.next_id)
        self.assertEqual(self.last(b).justification, (2, 1))

    def test_rule_name_may_be_a_string(self):
        after = apply_rule(proof("P -> Q", "P"), "MP", [2, 1])
        self.assertEqual(self.last(after).formula, Q)

    def test_both_implications(self):
        # step 1 is itself the antecedent of step 2
        state = proof("P -> Q", "(P -> Q) -> R")
        self.assertEqual(self.last(apply_rule(state, RuleName.MP, [1, 2])).formula, R)

    def test_antecedent_mismatch(self):
        err = self.assert_rule_error(RuleErrorKind.PATTERN_MISMATCH, proof("P -> Q", "Q"), RuleName.MP, [1, 2])
        self.assertIn("(A → B) and A", str(err))

    def test_no_implication(self):
        self.assert_rule_error(RuleErrorKind.PATTERN_MISMATCH, proof("P", "Q"), RuleName.MP, [1, 2])

    def test_depth_is_max_of_premises(self):
        state = ProofState(
            premises=(),
            goal=None,
            current_steps=(
                ProofStep(1, implies(P, Q), RuleName.ASSUME, depth=0),
                ProofStep(2, P, RuleName.ASSUME, depth=2),
            ),
            next_id=3,
        )
        self.assertEqual(self.last(apply_rule(state, RuleName.MP, [1, 2])).depth, 2)


class TestConjunction(RuleTestCase):

    def test_introduction_keeps_selection_order(self):
        state = proof("P", "Q")
        self.assertEqual(self.last(apply_rule(state, RuleName.CI, [1, 2])).formula, conj(P, Q))
        self.assertEqual(self.last(apply_rule(state, RuleName.CI, [2, 1])).formula, conj(Q, P))

    def test_introduction_with_itself(self):
        self.assertEqual(self.last(apply_rule(proof("P"), RuleName.CI, [1, 1])).formula, conj(P, P))

    def test_elimination(self):
        state = proof("(P -> Q) ∧ ¬R")
        left = apply_rule(state, RuleName.CE_LEFT, [1])
        right = apply_rule(state, RuleName.CE_RIGHT, [1])
        self.assertEqual(self.last(left).formula, implies(P, Q))
        self.assertEqual(self.last(right).formula, Not(R))
        self.assertEqual(self.last(left).justification, (1,))

    def test_elimination_needs_conjunction(self):
        for text in ("P", "P ∨ Q", "¬(P ∧ Q)", "P -> Q ∧ R"):
            state = proof(text)
            for rule in (RuleName.CE_LEFT, RuleName.CE_RIGHT):
                self.assert_rule_error(RuleErrorKind.PATTERN_MISMATCH, state, rule, [1])


class TestDoubleNegation(RuleTestCase):

    def test_removes_two_negations(self):
        self.assertEqual(self.last(apply_rule(proof("~~(P ∨ Q)"), RuleName.DN, [1])).formula, disj(P, Q))

    def test_only_outer_pair(self):
        self.assertEqual(self.last(apply_rule(proof("¬¬¬P"), RuleName.DN, [1])).formula, Not(P))

    def test_single_negation_fails(self):
        self.assert_rule_error(RuleErrorKind.PATTERN_MISMATCH, proof("¬P"), RuleName.DN, [1])


class TestDisjunctionIntroduction(RuleTestCase):

    def test_left_and_right(self):
        state = proof("P")
        self.assertEqual(self.last(apply_rule(state, RuleName.DI_LEFT, [1], Q)).formula, disj(P, Q))
        self.assertEqual(self.last(apply_rule(state, RuleName.DI_RIGHT, [1], Q)).formula, disj(Q, P))

    def test_requires_secondary(self):
        self.assert_rule_error(RuleErrorKind.MISSING_SECONDARY_FORMULA, proof("P"), RuleName.DI_LEFT, [1])

    def test_arity_checked_before_secondary(self):
        self.assert_rule_error(RuleErrorKind.ARITY_MISMATCH, proof("P", "Q"), RuleName.DI_RIGHT, [1, 2])


class TestDisjunctiveSyllogism(RuleTestCase):

    def test_negated_left_disjunct(self):
        after = apply_rule(proof("P ∨ Q", "¬P"), RuleName.DS, [1, 2])
        self.assertEqual(self.last(after).formula, Q)

    def test_negated_right_disjunct_any_order(self):
        after = apply_rule(proof("P ∨ Q", "¬Q"), RuleName.DS, [2, 1])
        self.assertEqual(self.last(after).formula, P)

    def test_unrelated_negation_fails(self):
        err = self.assert_rule_error(RuleErrorKind.PATTERN_MISMATCH, proof("P ∨ Q", "¬R"), RuleName.DS, [1, 2])
        self.assertIn("DS", str(err))

    def test_needs_a_negation(self):
        self.assert_rule_error(RuleErrorKind.PATTERN_MISMATCH, proof("P ∨ Q", "P"), RuleName.DS, [1, 2])
        self.assert_rule_error(RuleErrorKind.PATTERN_MISMATCH, proof("P ∨ Q", "P ∨ Q"), RuleName.DS, [1, 2])


class TestImplicationIntroduction(RuleTestCase):

    def setUp(self):
        # 1: P -> Q (premise), 2: P (assumption), 3: Q by MP
        state = add_assumption(proof("P -> Q"), P)
        self.state = apply_rule(state, RuleName.MP, [1, 2])

    def test_discharges_assumption(self):
        after = apply_rule(self.state, RuleName.II, [2, 3])
        new = self.last(after)
        self.assertEqual(new.formula, implies(P, Q))
        self.assertEqual(new.justification, (2, 3))
        self.assertEqual(new.depth, 0)
        self.assertEqual(new.rule, RuleName.II)
        self.assertFalse(new.is_discharged)
        self.assertTrue(find_step(after, 2).is_discharged)
        self.assertEqual(after.current_steps[0], self.state.current_steps[0])
        self.assertEqual(after.current_steps[2], self.state.current_steps[2])
        self.assertEqual([s.id for s in after.current_steps], [1, 2, 3, 4])

    def test_selection_order_does_not_matter(self):
        self.assertEqual(apply_rule(self.state, RuleName.II, [3, 2]), apply_rule(self.state, RuleName.II, [2, 3]))

    def test_both_assumed_prefers_lower_id(self):
        # both 1 and 2 are ASSUME here, so the lower id (1) is the assumption
        after = apply_rule(self.state, RuleName.II, [2, 1])
        self.assertEqual(self.last(after).formula, implies(implies(P, Q), P))
        self.assertEqual(self.last(after).justification, (1, 2))

    def test_single_assume_step_chosen_even_with_higher_id(self):
        state = add_assumption(apply_rule(proof("P", "Q"), RuleName.CI, [1, 2]), R)
        # 3: P ∧ Q by CI, 4: R assumed
        after = apply_rule(state, RuleName.II, [3, 4])
        self.assertEqual(self.last(after).formula, implies(R, conj(P, Q)))
        self.assertEqual(self.last(after).justification, (4, 3))
        self.assertTrue(find_step(after, 4).is_discharged)

    def test_choose_assumption_neither_tagged(self):
        a = ProofStep(5, P, RuleName.MP)
        b = ProofStep(3, Q, RuleName.DN)
        self.assertEqual(choose_assumption(a, b), (b, a))

    def test_arity(self):
        self.assert_rule_error(RuleErrorKind.ARITY_MISMATCH, self.state, RuleName.II, [2])


class TestCommonChecks(RuleTestCase):

    def test_arity_mismatch(self):
        state = proof("P", "Q", "R")
        for rule, ids in ((RuleName.MP, [1]), (RuleName.CI, [1, 2, 3]), (RuleName.CE_LEFT, []),
                          (RuleName.DN, [1, 2]), (RuleName.DS, [1])):
            self.assert_rule_error(RuleErrorKind.ARITY_MISMATCH, state, rule, ids)

    def test_step_not_found(self):
        state = proof("P -> Q", "P")
        err = self.assert_rule_error(RuleErrorKind.STEP_NOT_FOUND, state, RuleName.MP, [1, 7])
        self.assertIn("7", str(err))
        self.assert_rule_error(RuleErrorKind.STEP_NOT_FOUND, state, RuleName.CI, [9, 1])
        self.assert_rule_error(RuleErrorKind.STEP_NOT_FOUND, state, RuleName.DI_LEFT, [3], Q)

    def test_unknown_rule(self):
        state = proof("P")
        self.assert_rule_error(RuleErrorKind.UNKNOWN_RULE, state, "XYZ", [1])
        self.assert_rule_error(RuleErrorKind.UNKNOWN_RULE, state, RuleName.ASSUME, [1])

    def test_input_state_is_untouched(self):
        state = proof("P -> Q", "P")
        before = list(state.current_steps)
        after = apply_rule(state, RuleName.MP, [1, 2])
        self.assertEqual(list(state.current_steps), before)
        self.assertEqual(state.next_id, 3)
        self.assertIsNot(after, state)

    def test_input_state_untouched_by_discharge(self):
        state = add_assumption(proof("Q"), P)
        apply_rule(state, RuleName.II, [2, 1])
        self.assertFalse(any(s.is_discharged for s in state.current_steps))

    def test_failed_rule_leaves_state_untouched(self):
        state = proof("P", "Q")
        before = list(state.current_steps)
        with self.assertRaises(RuleError):
            apply_rule(state, RuleName.MP, [1, 2])
        self.assertEqual(list(state.current_steps), before)

    def test_ids_are_monotonic(self):
        state = proof("P -> Q", "P", "R")
        for rule, ids, secondary in ((RuleName.MP, [1, 2], None), (RuleName.CI, [4, 3], None),
                                     (RuleName.CE_RIGHT, [5], None), (RuleName.DI_LEFT, [6], P)):
            after = apply_rule(state, rule, ids, secondary)
            self.assertEqual(after.next_id, state.next_id + 1)
            self.assertEqual(self.last(after).id, state.next_id)
            state = after
        self.assertEqual(self.last(state).formula, disj(R, P))


class TestSuggestions(unittest.TestCase):

    def test_pattern_mismatch_hint_names_rule_shape(self):
        with self.assertRaises(RuleError) as cm:
            apply_rule(proof("P", "Q"), RuleName.MP, [1, 2])
        self.assertIn("(A → B)", suggest_on_failure(cm.exception))

    def test_missing_secondary_hint(self):
        with self.assertRaises(RuleError) as cm:
            apply_rule(proof("P"), RuleName.DI_RIGHT, [1])
        self.assertIn("other disjunct", suggest_on_failure(cm.exception))


if __name__ == "__main__":
    unittest.main()
