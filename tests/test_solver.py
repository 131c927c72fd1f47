import math

import pytest

from chord_roots.functions import log_sine
from chord_roots.scanner import scan_brackets
from chord_roots.solver import (
    IterationPoint,
    RootResult,
    SolveStatus,
    solve_brent_reference,
    solve_chord,
)


@pytest.fixture
def log_sine_brackets():
    brackets = scan_brackets(log_sine, -6.0, 2.0)
    assert brackets
    return brackets


class TestSolveChord:

    def test_linear_root_single_iteration(self):
        res = solve_chord(lambda x: x - 0.3, 0.0, 1.0, tol_x=1e-9, tol_f=1e-9, stop_rule="either")
        assert isinstance(res, RootResult)
        assert res.converged
        assert res.root == pytest.approx(0.3, abs=1e-12)
        assert res.iterations == 1
        assert res.evaluations == 3
        assert math.isnan(res.convergence)

    def test_both_rule_needs_small_step_too(self):
        res = solve_chord(lambda x: x - 0.3, 0.0, 1.0, tol_x=1e-9, tol_f=1e-9, stop_rule="both")
        assert res.converged
        # first step lands on the root but moves 0.3, so a second step is needed
        assert res.iterations == 2
        assert res.error <= 1e-9
        assert not math.isnan(res.convergence)

    def test_fixed_endpoint_is_larger_magnitude_end(self):
        # f(1) = -1, f(2) = 2: x = 2 stays fixed and iterates climb from 1
        res = solve_chord(lambda x: x * x - 2, 1.0, 2.0, tol_x=1e-12, tol_f=1e-12, record_history=True)
        assert res.converged
        xs = [p.x for p in res.history]
        assert all(isinstance(p, IterationPoint) for p in res.history)
        assert xs == sorted(xs)
        assert all(x <= math.sqrt(2) + 1e-12 for x in xs)
        assert res.root == pytest.approx(math.sqrt(2), abs=1e-10)

    def test_history_matches_counts(self):
        res = solve_chord(lambda x: x * x - 2, 1.0, 2.0, tol_x=1e-10, tol_f=1e-10, record_history=True)
        assert len(res.history) == res.iterations
        assert [p.iteration for p in res.history] == list(range(1, res.iterations + 1))
        assert res.history[-1].x == res.root
        assert res.history[-1].error == res.error

    def test_no_history_by_default(self):
        res = solve_chord(lambda x: x * x - 2, 1.0, 2.0)
        assert res.history == ()

    def test_root_inside_bracket_and_tolerances_met(self, log_sine_brackets):
        for br in log_sine_brackets:
            res = solve_chord(log_sine, br.left, br.right, tol_x=1e-4, tol_f=1e-4)
            assert res.converged
            assert br.left - 1e-12 <= res.root <= br.right + 1e-12
            assert abs(log_sine(res.root)) <= 1e-4
            assert res.error <= 1e-4
            assert res.f_root == log_sine(res.root)

    def test_evaluations_are_iterations_plus_two(self, log_sine_brackets):
        for br in log_sine_brackets:
            for tol in (1.0, 1e-3, 1e-8):
                res = solve_chord(log_sine, br.left, br.right, tol_x=tol, tol_f=tol)
                assert res.evaluations == res.iterations + 2

    def test_convergence_defined_after_first_iteration(self, log_sine_brackets):
        br = log_sine_brackets[0]
        res = solve_chord(log_sine, br.left, br.right, tol_x=1e-10, tol_f=1e-10)
        assert res.iterations > 1
        assert not math.isnan(res.convergence)
        assert res.convergence >= 0

    def test_deterministic(self, log_sine_brackets):
        br = log_sine_brackets[-1]
        first = solve_chord(log_sine, br.left, br.right, tol_x=1e-6, tol_f=1e-6)
        second = solve_chord(log_sine, br.left, br.right, tol_x=1e-6, tol_f=1e-6)
        assert first.root == second.root
        assert first.f_root == second.f_root
        assert first.error == second.error
        assert first.iterations == second.iterations
        assert first.evaluations == second.evaluations
        assert first.status is second.status

    def test_loose_tolerances_stop_quickly(self, log_sine_brackets):
        for br in log_sine_brackets:
            res = solve_chord(log_sine, br.left, br.right, tol_x=1.0, tol_f=1.0)
            assert res.converged
            assert res.iterations <= 3

    def test_iteration_ceiling(self):
        res = solve_chord(lambda x: x * x - 2, 1.0, 2.0, tol_x=1e-300, tol_f=1e-300, max_iter=3)
        assert res.status is SolveStatus.MAX_ITERATIONS
        assert not res.converged
        assert res.iterations == 3
        assert res.evaluations == 5
        assert 1.0 < res.root < 2.0

    def test_horizontal_chord_is_degenerate(self):
        res = solve_chord(lambda x: 1.0, 0.0, 1.0)
        assert res.status is SolveStatus.DEGENERATE
        assert math.isnan(res.root)
        assert not res.is_finite
        assert res.iterations == 0
        assert res.evaluations == 2

    def test_iterate_outside_domain_diverges(self):
        def f(x):
            return None if 0.05 < x < 0.1 else x - 0.075

        res = solve_chord(f, 0.0, 0.16)
        assert res.status is SolveStatus.DIVERGED
        assert math.isnan(res.root)
        assert res.iterations == 1
        assert res.evaluations == 3

    def test_undefined_endpoint_rejected(self):
        with pytest.raises(ValueError, match="defined at both ends"):
            solve_chord(log_sine, -8.0, -6.0)

    def test_bad_stop_rule(self):
        with pytest.raises(ValueError, match="stop_rule"):
            solve_chord(lambda x: x, -1.0, 1.0, stop_rule="any")

    def test_bad_max_iter(self):
        with pytest.raises(ValueError, match="max_iter"):
            solve_chord(lambda x: x, -1.0, 1.0, max_iter=0)

    def test_status_str(self):
        assert str(SolveStatus.CONVERGED) == "converged"
        assert str(SolveStatus.MAX_ITERATIONS) == "max_iterations"


class TestBrentReference:

    def test_agrees_with_chord(self, log_sine_brackets):
        for br in log_sine_brackets:
            chord = solve_chord(log_sine, br.left, br.right, tol_x=1e-10, tol_f=1e-10)
            brent = solve_brent_reference(log_sine, br.left, br.right)
            assert brent is not None
            assert abs(chord.root - brent) < 1e-8

    def test_no_sign_change(self):
        assert solve_brent_reference(lambda x: x * x + 1, -1.0, 1.0) is None

    def test_undefined_endpoint(self):
        assert solve_brent_reference(log_sine, -8.0, -6.0) is None
