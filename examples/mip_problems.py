"""Classic Mixed-Integer Programming (MIP) examples using mipbnb.

Each example writes the decision vector out explicitly, builds linear rows
with `Constraint.linear` (or plain callables for affine expressions) and
hands everything to `BranchAndBoundSolver`.

Run this module directly to execute all examples, or import individual
functions to experiment interactively.
"""

from __future__ import annotations

import autograd.numpy as np

import mipbnb as mb
from mipbnb import BranchAndBoundSolver, Constraint, IntegerProgramSpecification


# =============================================================================
# Knapsack Problem
# =============================================================================

def knapsack_problem():
    """
    0/1 Knapsack Problem
    --------------------
    Given items with weights and values, select items to maximize
    total value without exceeding the knapsack capacity.

    Formulation:
        maximize    sum(v[i] * x[i] for all items i)
        subject to  sum(w[i] * x[i] for all items i) <= capacity
                    x[i] in {0, 1}  (binary: take or don't take)
    """
    print("=" * 60)
    print("0/1 KNAPSACK PROBLEM")
    print("=" * 60)

    items = ["Gold Bar", "Silver Coins", "Diamond", "Painting", "Watch"]
    values = np.array([10.0, 6.0, 14.0, 7.0, 3.0])
    weights = np.array([5.0, 3.0, 7.0, 4.0, 2.0])
    capacity = 15.0

    n = len(items)

    # Binary variables get their x[i] <= 1 rows automatically
    spec = IntegerProgramSpecification.all_binary(n)
    constraints = [Constraint.linear(weights, capacity, "<=", name="capacity")]

    solver = BranchAndBoundSolver()
    result = solver.solve(
        lambda x: np.dot(values, x),
        np.zeros(n),
        constraints,
        spec,
        minimize=False,
    )

    print("\nItems available (value, weight):")
    for i, item in enumerate(items):
        print(f"  {item}: value={values[i]:g}, weight={weights[i]:g}")
    print(f"\nKnapsack capacity: {capacity:g}")
    print("\nOptimal selection:")

    x = result.integer_solution
    for i, item in enumerate(items):
        print(f"  [{'X' if x[i] > 0.5 else ' '}] {item}")

    print(f"\nTotal value: {result.objective_value:g}")
    print(f"Total weight: {np.dot(weights, x):g}/{capacity:g}")
    print(f"Status: {result.status}")

    return result


# =============================================================================
# Set Cover
# =============================================================================

def set_cover_problem():
    """
    Set Cover Problem
    -----------------
    Given a universe of elements and a collection of sets, find the
    minimum number of sets that cover all elements.

    Formulation:
        minimize    sum(x[j] for all sets j)
        subject to  sum(x[j] for j where element i is in set j) >= 1
                    x[j] in {0, 1}
    """
    print("\n" + "=" * 60)
    print("SET COVER PROBLEM")
    print("=" * 60)

    neighborhoods = ["Downtown", "Uptown", "Riverside", "Hills", "Garden", "Industrial"]

    stations = {
        "Station_Central": [0, 1, 2],
        "Station_North": [1, 3],
        "Station_East": [2, 4, 5],
        "Station_West": [0, 3, 4],
        "Station_South": [4, 5],
    }

    station_names = list(stations.keys())
    n_stations = len(stations)

    constraints = []
    for i, neighborhood in enumerate(neighborhoods):
        covers = [1.0 if i in stations[name] else 0.0 for name in station_names]
        constraints.append(Constraint.linear(covers, 1.0, ">=", name=f"cover {neighborhood}"))

    result = mb.solve(
        lambda x: np.sum(x),
        np.zeros(n_stations),
        constraints,
        IntegerProgramSpecification.all_binary(n_stations),
        node_selection=mb.DEPTH_FIRST,
    )

    print(f"\nNeighborhoods: {', '.join(neighborhoods)}")
    print("\nOptimal station placement:")
    selected = [station_names[j] for j in range(n_stations) if result.integer_solution[j] > 0.5]
    for station in selected:
        print(f"  [X] {station}")

    print(f"\nNumber of stations needed: {len(selected)}")
    print(f"Status: {result.status}")

    return result


# =============================================================================
# Facility Location
# =============================================================================

def facility_location():
    """
    Uncapacitated Facility Location Problem
    ----------------------------------------
    Decide which facilities to open and assign customers to facilities
    to minimize total cost (fixed opening costs + transportation costs).

    Formulation:
        minimize    sum(f[j] * y[j]) + sum(c[i,j] * x[i,j])
        subject to  sum(x[i,j] for j) = 1           (each customer assigned once)
                    x[i,j] <= y[j]                   (can only use open facilities)
                    x[i,j], y[j] in {0, 1}

    The decision vector holds y (one entry per warehouse) followed by x,
    row-major by store.
    """
    print("\n" + "=" * 60)
    print("FACILITY LOCATION PROBLEM")
    print("=" * 60)

    warehouses = ["Chicago", "Denver", "Atlanta"]
    fixed_costs = np.array([100.0, 80.0, 90.0])
    stores = ["NYC", "LA", "Miami", "Seattle"]

    # Transportation costs from warehouse j to store i
    transport_costs = np.array([
        [10.0, 40.0, 25.0, 45.0],
        [30.0, 15.0, 35.0, 20.0],
        [20.0, 35.0, 10.0, 50.0],
    ])

    n_w, n_s = len(warehouses), len(stores)
    dim = n_w + n_w * n_s

    def x_index(i, j):
        return n_w + i * n_w + j

    costs = np.zeros(dim)
    costs[:n_w] = fixed_costs
    for i in range(n_s):
        for j in range(n_w):
            costs[x_index(i, j)] = transport_costs[j, i]

    constraints = []
    for i in range(n_s):
        row = np.zeros(dim)
        row[[x_index(i, j) for j in range(n_w)]] = 1.0
        constraints.append(Constraint.linear(row, 1.0, "==", name=f"serve {stores[i]}"))
        for j in range(n_w):
            row = np.zeros(dim)
            row[x_index(i, j)] = 1.0
            row[j] = -1.0
            constraints.append(Constraint.linear(row, 0.0, "<="))

    solver = BranchAndBoundSolver(branching_rule=mb.PSEUDOCOST)
    result = solver.solve(
        lambda x: np.dot(costs, x),
        np.zeros(dim),
        constraints,
        IntegerProgramSpecification.all_binary(dim),
    )

    x = result.integer_solution
    print("\nOpen warehouses:")
    for j, name in enumerate(warehouses):
        if x[j] > 0.5:
            print(f"  [X] {name} (fixed cost {fixed_costs[j]:g})")

    print("\nAssignments:")
    for i, store in enumerate(stores):
        for j, name in enumerate(warehouses):
            if x[x_index(i, j)] > 0.5:
                print(f"  {store} <- {name} (cost {transport_costs[j, i]:g})")

    print(f"\nTotal cost: {result.objective_value:g}")
    print(f"Status: {result.status}")

    return result


# =============================================================================
# Production Planning (general integers)
# =============================================================================

def production_planning():
    """
    Production Planning
    -------------------
    Choose whole production runs of each product to maximize profit under
    machine-hour and labor-hour budgets.

    Formulation:
        maximize    sum(p[k] * x[k])
        subject to  sum(m[k] * x[k]) <= machine_hours
                    sum(l[k] * x[k]) <= labor_hours
                    x[k] in {0, 1, 2, ...}
    """
    print("\n" + "=" * 60)
    print("PRODUCTION PLANNING")
    print("=" * 60)

    products = ["Chairs", "Tables", "Desks"]
    profit = np.array([5.0, 4.0, 3.0])
    machine = np.array([6.0, 4.0, 2.0])
    labor = np.array([1.0, 2.0, 1.5])
    machine_hours, labor_hours = 24.0, 6.0

    constraints = [
        Constraint.linear(machine, machine_hours, name="machine hours"),
        Constraint.inequality(lambda x: np.dot(labor, x) - labor_hours, name="labor hours"),
    ]
    spec = IntegerProgramSpecification.all_integer(len(products))

    for rule in mb.BranchingRule:
        result = BranchAndBoundSolver(branching_rule=rule).solve(
            lambda x: np.dot(profit, x),
            np.zeros(len(products)),
            constraints,
            spec,
            minimize=False,
        )
        print(f"\n{rule.value}: profit {result.objective_value:g} "
              f"after {result.nodes_explored} node(s), status {result.status}")

    print("\nProduction runs:")
    for k, product in enumerate(products):
        print(f"  {product}: {result.integer_solution[k]:g}")

    print("\nConstraint violations at the plan:")
    for con in constraints:
        print(f"  {con.name}: {con.violation(result.integer_solution):g}")

    return result


# =============================================================================
# Assignment Problem
# =============================================================================

def assignment_problem():
    """
    Assignment Problem
    ------------------
    Assign n workers to n tasks to minimize total cost, where each
    worker is assigned exactly one task and each task to one worker.

    Formulation:
        minimize    sum(c[i,j] * x[i,j])
        subject to  sum(x[i,j] for j) = 1   (each worker gets one task)
                    sum(x[i,j] for i) = 1   (each task gets one worker)
                    x[i,j] in {0, 1}
    """
    print("\n" + "=" * 60)
    print("ASSIGNMENT PROBLEM")
    print("=" * 60)

    workers = ["Alice", "Bob", "Carol", "Dave"]
    tasks = ["Frontend", "Backend", "Database", "Testing"]

    costs = np.array([
        [9.0, 2.0, 7.0, 8.0],
        [6.0, 4.0, 3.0, 7.0],
        [5.0, 8.0, 1.0, 8.0],
        [7.0, 6.0, 9.0, 4.0],
    ])

    n = len(workers)

    constraints = []
    for i in range(n):
        row = np.zeros((n, n))
        row[i, :] = 1.0
        constraints.append(Constraint.linear(row.ravel(), 1.0, "=="))
    for j in range(n):
        row = np.zeros((n, n))
        row[:, j] = 1.0
        constraints.append(Constraint.linear(row.ravel(), 1.0, "=="))

    solver = BranchAndBoundSolver(verbose=True)
    result = solver.solve(
        lambda x: np.dot(costs.ravel(), x),
        np.eye(n).ravel(),
        constraints,
        IntegerProgramSpecification.all_binary(n * n),
    )

    print("\nCost matrix (worker -> task):")
    print(f"  {'':8}" + "".join(f"{t:>10}" for t in tasks))
    for i, worker in enumerate(workers):
        row = "".join(f"{costs[i][j]:>10g}" for j in range(n))
        print(f"  {worker:8}{row}")

    print("\nOptimal assignment:")
    x = result.integer_solution.reshape(n, n)
    for i, worker in enumerate(workers):
        for j, task in enumerate(tasks):
            if x[i, j] > 0.5:
                print(f"  {worker} -> {task} (cost: {costs[i, j]:g})")

    print(f"\nTotal cost: {result.objective_value:g}")
    print(f"Status: {result.status}")

    return result


# =============================================================================
# Run All Examples
# =============================================================================

ALL_EXAMPLES = [
    knapsack_problem,
    set_cover_problem,
    facility_location,
    production_planning,
    assignment_problem,
]


def run_all_examples():
    """Run all MIP example problems."""
    print("\n" + "#" * 60)
    print("# CLASSIC MIP PROBLEMS WITH mipbnb")
    print("#" * 60)

    for example in ALL_EXAMPLES:
        try:
            example()
        except Exception as e:
            print(f"\nExample {example.__name__} failed: {e}")
        print()


if __name__ == "__main__":
    run_all_examples()
