from enum import StrEnum


class NodeSelection(StrEnum):
    DEPTH_FIRST = "depth_first"  # Deepest node first (finds feasible solutions faster)
    BREADTH_FIRST = "breadth_first"  # Shallowest node first
    BEST_BOUND = "best_bound"  # Most favorable relaxation bound first
    BEST_ESTIMATE = "best_estimate"  # Currently ordered like BEST_BOUND


class BranchingRule(StrEnum):
    MOST_FRACTIONAL = "most_fractional"  # Branch on variable furthest from integer
    PSEUDOCOST = "pseudocost"  # Use historical bound degradation per unit
    STRONG_BRANCHING = "strong_branching"  # Solve both children before committing


class GradientMethod(StrEnum):
    FINITE_DIFFERENCE = "finite_difference"
    AUTOGRAD = "autograd"


DEFAULT_MAX_NODES = 10_000
DEFAULT_TIME_LIMIT = 300.0
DEFAULT_REL_GAP = 1e-4
DEFAULT_LP_TOLERANCE = 1e-8
DEFAULT_INT_TOLERANCE = 1e-6
DEFAULT_STRONG_BRANCH_LIMIT = 5
FINITE_DIFFERENCE_STEP = 1e-8
AFFINE_CHECK_SHIFT = 1.0
AFFINE_CHECK_RTOL = 1e-4
