"""
Tests for Z3 solver backend.
"""
import z3
from memmodel.c11.solver import Z3Solver, SolverResult


def test_z3_solver_unsat():
    """Test that Z3 correctly identifies unsatisfiable constraints."""
    solver = Z3Solver()
    
    x = z3.Int('x')
    solver.add_constraint(x > 10)
    solver.add_constraint(x < 5)
    
    result = solver.check_sat()
    
    assert result.is_sat is False
    assert result.result == SolverResult.UNSAT
    assert result.model is None
    assert result.solver_name == "z3"


def test_z3_solver_sat():
    """Test that Z3 correctly finds satisfying assignments."""
    solver = Z3Solver()
    
    x = z3.Int('x')
    solver.add_constraints([x > 10, x < 20])
    
    result = solver.check_sat()
    
    assert result.is_sat is True
    assert result.result == SolverResult.SAT
    assert result.model is not None
    assert 10 < result.model.eval(x).as_long() < 20
    assert result.solver_time_ms >= 0.0


def test_z3_solver_push_pop():
    """Test Z3 push/pop for backtracking."""
    solver = Z3Solver()
    
    x = z3.Int('x')
    solver.add_constraint(x > 10)
    
    # First check: x > 10
    assert solver.check() == SolverResult.SAT
    
    # Add conflicting constraint in new scope
    solver.push()
    solver.add_constraint(x < 5)
    assert solver.num_scopes() == 1
    
    # Second check: x > 10 AND x < 5
    assert solver.check() == SolverResult.UNSAT
    
    # Pop back to original state
    solver.pop()
    assert solver.num_scopes() == 0
    
    # Third check: back to just x > 10
    assert solver.check() == SolverResult.SAT


def test_z3_solver_model_tracks_last_check():
    """Test that a model is only available after a satisfiable check."""
    solver = Z3Solver()
    
    y = z3.Int('y')
    assert solver.model() is None
    
    solver.add_constraint(y == 42)
    solver.check()
    assert solver.model().eval(y).as_long() == 42
    
    solver.reset()
    assert solver.model() is None


def test_z3_solver_reset():
    """Test Z3 solver reset functionality."""
    solver = Z3Solver()
    
    x = z3.Int('x')
    solver.add_constraint(x > 10)
    solver.add_constraint(x < 5)
    
    assert solver.check_sat().result == SolverResult.UNSAT
    
    solver.reset()
    assert solver.assertions() == []
    
    # After reset, add only satisfiable constraint
    solver.add_constraint(z3.Bool('a'))
    result = solver.check_sat()
    assert result.is_sat
    assert z3.is_true(result.model.eval(z3.Bool('a')))


def test_z3_solver_wraps_existing():
    """Test that an existing z3.Solver keeps its assertions when wrapped."""
    raw = z3.Solver()
    a = z3.Bool('a')
    raw.add(a, z3.Not(a))
    
    solver = Z3Solver(raw)
    assert solver.check() == SolverResult.UNSAT
    assert "unsat" in str(solver.check_sat())


def test_z3_solver_check_maps_results():
    """Test that raw z3 check results map onto SolverResult."""
    solver = Z3Solver()
    assert solver.check() == SolverResult.SAT
    
    p = z3.Bool('p')
    solver.add_constraint(z3.And(p, z3.Not(p)))
    assert solver.check() == SolverResult.UNSAT
    assert solver.model() is None
