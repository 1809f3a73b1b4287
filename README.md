# mavtraj

Building blocks for polynomial trajectories of multirotor aerial vehicles.

## Modules

- `mavtraj.motion_defines`: `DerivativeOrder` is an `IntEnum` of derivative
  orders: `POSITION`, `VELOCITY`, `ACCELERATION`, `JERK`, `SNAP` and
  `INVALID`. `ORIENTATION`, `ANGULAR_VELOCITY` and `ANGULAR_ACCELERATION`
  are aliases of orders 0, 1 and 2.
- `mavtraj.polynomial`: `Polynomial` holds its coefficients in increasing
  powers of `t`. It supports `+`, `+=`, products with another polynomial
  (convolution of the coefficients) or with a number, and `evaluate` and
  `evaluate_up_to` for any derivative. It also provides `roots`,
  `compute_min_max_candidates`, `compute_min_max`,
  `select_min_max_from_roots` and `select_min_max_from_candidates`. Minima
  and maxima are returned as `(t, value)` pairs. `with_appended_coefficients`
  pads a polynomial with zeros, `scale_in_time` replaces `p(t)` by `p(b*t)`,
  and `offset` adds a constant. The module functions are
  `compute_base_coefficients`, `base_coeffs_with_time`, `convolve`,
  `convolution_length` and `select_min_max_candidates_from_roots`.
- `mavtraj.vertex`: a `Vertex` holds fixed values for some derivatives at a
  waypoint. Its methods are `add_constraint`, `remove_constraint`,
  `make_start_or_end`, `get_constraint` (which returns `None` when the
  derivative is unconstrained), `has_constraint`, `number_of_constraints`,
  `is_equal_tol` and `subdimension`. Waypoint lists are built with
  `create_random_vertices`, `create_random_vertices_1d` and
  `create_square_vertices`, and printed with `format_vertices`. Initial
  segment times come from `estimate_segment_times`,
  `estimate_segment_times_velocity_ramp` (at least 0.1 s per segment) or
  `estimate_segment_times_nfabian`. `compute_time_velocity_ramp` gives the
  time of a single move.
- `mavtraj.input_constraints`: `InputConstraints` holds limits keyed by
  `InputConstraintType` (`F_MIN`, `F_MAX`, `V_MAX`, `OMEGA_XY_MAX`,
  `OMEGA_Z_MAX`, `OMEGA_Z_DOT_MAX`). Values are stored as absolute values,
  and setting either thrust limit keeps `f_max >= f_min`.
  `set_default_values` fills in standard limits. `to_dict`/`from_dict` and
  `to_yaml`/`from_yaml` convert the limits to and from name/value mappings.
  `input_constraint_name` gives the name of a type.
- `mavtraj.feasibility`: `Segment` is one `Polynomial` per dimension, all of
  the same size, valid over `[0, time]`. `HalfPlane` is built from a point
  and a normal, or with `HalfPlane.from_points` and
  `HalfPlane.create_bounding_box`. `FeasibilityBase` checks that 3- or 4-D
  segments stay strictly inside its `half_plane_constraints`.
  `FeasibilityRecursive` checks thrust, velocity, roll/pitch rate and, for
  4-D segments, yaw rate and yaw acceleration against the input constraints.
  It bisects a segment until sections are shorter than `min_section_time_s`
  (0.05 s by default). Results are `InputFeasibilityResult` values, and
  `input_feasibility_result_name` gives their names.
- `mavtraj.timing`: `Accumulator` keeps totals, minimum, maximum, and the mean
  and variance over a sliding window of samples (50 by default). `MiniTimer`
  is a small stopwatch.

## Installation

```
pip install .
```

## Example

```python
from mavtraj.motion_defines import DerivativeOrder
from mavtraj.polynomial import Polynomial
from mavtraj.vertex import Vertex, estimate_segment_times

p = Polynomial([1.0, 2.0]) * Polynomial([-1.0, 3.0])
(t_min, p_min), (t_max, p_max) = p.compute_min_max(0.0, 1.0, DerivativeOrder.POSITION)

start, goal = Vertex(3), Vertex(3)
start.make_start_or_end([0.0, 0.0, 0.0], DerivativeOrder.SNAP)
goal.make_start_or_end([1.0, 2.0, 3.0], DerivativeOrder.SNAP)
times = estimate_segment_times([start, goal], v_max=2.0, a_max=2.0)
```

To check a segment against input constraints:

```python
from mavtraj.feasibility import FeasibilityRecursive, Segment, input_feasibility_result_name
from mavtraj.input_constraints import InputConstraints
from mavtraj.polynomial import Polynomial

constraints = InputConstraints()
constraints.set_default_values()
checker = FeasibilityRecursive(constraints)
segment = Segment(
    [
        Polynomial([0.0, 1.0, 0.0, 0.0, 0.0, 0.0]),
        Polynomial([0.0] * 6),
        Polynomial([0.0] * 6),
    ],
    2.0,
)
print(input_feasibility_result_name(checker.check_input_feasibility(segment)))
```

## What the package does not do

The package provides polynomials, vertices, time estimates and feasibility
checks. It does not solve for trajectories through the vertices: there is no
linear or nonlinear optimizer. It has no multi-segment trajectory type, no
sampling of trajectories into states, and no file format for saving
trajectories. It does not send or receive messages or draw markers for a
robot middleware. `FeasibilityBase` on its own always reports input
feasibility as indeterminable.

## Tests

```
pip install .[test]
pytest
```