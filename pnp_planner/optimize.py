# pnp_planner/optimize.py
# Travel-order optimizer for dispensing: visit every (part, pad) once with
# little travel between consecutive points.
#
# Methods:
# - "routing": OR-Tools routing solver, single vehicle, open path from the
#   machine origin. Local search is capped by a solution count rather than
#   a wall-clock limit, so output is reproducible and run time stays bounded.
# - "greedy": nearest neighbour from the machine origin, ties by input order.
#
# Both return a permutation of the input; the input list is not modified.

from __future__ import annotations

from typing import List, Sequence, Tuple

from ortools.constraint_solver import pywrapcp, routing_enums_pb2

from .config import DEFAULTS
from .types import Pad, Part, Position, distance, pad_position

OptimizeItem = Tuple[Part, Pad]

METHODS = ("routing", "greedy")

# Routing costs are integers; work in microns.
_SCALE = 1000


def _points(items: Sequence[OptimizeItem]) -> List[Position]:
    return [pad_position(part, pad) for part, pad in items]


def path_length(items: Sequence[OptimizeItem], start: Position = Position()) -> float:
    """Total travel from `start` through all items in order."""
    total = 0.0
    here = start
    for p in _points(items):
        total += distance(here, p)
        here = p
    return total


def _optimize_greedy(items: List[OptimizeItem], start: Position) -> List[OptimizeItem]:
    pts = _points(items)
    todo = list(range(len(items)))
    order: List[int] = []
    here = start
    while todo:
        best = min(todo, key=lambda i: (distance(here, pts[i]), i))
        todo.remove(best)
        order.append(best)
        here = pts[best]
    return [items[i] for i in order]


def _search_parameters(solution_limit: int):
    params = pywrapcp.DefaultRoutingSearchParameters()
    params.first_solution_strategy = routing_enums_pb2.FirstSolutionStrategy.PATH_CHEAPEST_ARC
    params.solution_limit = solution_limit
    return params


def _optimize_routing(items: List[OptimizeItem], start: Position, solution_limit: int) -> List[OptimizeItem]:
    pts = _points(items)
    n = len(pts)
    depot = n  # start node: the machine origin

    def node_pos(i: int) -> Position:
        return start if i == depot else pts[i]

    matrix = [[0] * (n + 1) for _ in range(n + 1)]
    for i in range(n + 1):
        for j in range(n + 1):
            if i == j or j == depot:
                continue  # returning to the depot is free: open path
            matrix[i][j] = int(round(distance(node_pos(i), node_pos(j)) * _SCALE))

    manager = pywrapcp.RoutingIndexManager(n + 1, 1, depot)
    routing = pywrapcp.RoutingModel(manager)

    def transit(from_index: int, to_index: int) -> int:
        return matrix[manager.IndexToNode(from_index)][manager.IndexToNode(to_index)]

    cb = routing.RegisterTransitCallback(transit)
    routing.SetArcCostEvaluatorOfAllVehicles(cb)

    solution = routing.SolveWithParameters(_search_parameters(solution_limit))
    if solution is None:
        raise RuntimeError(f"Routing solver found no visiting order for {n} pads")

    order: List[int] = []
    index = routing.Start(0)
    while not routing.IsEnd(index):
        node = manager.IndexToNode(index)
        if node != depot:
            order.append(node)
        index = solution.Value(routing.NextVar(index))
    return [items[i] for i in order]


def optimize_parts(
    items: Sequence[OptimizeItem],
    *,
    method: str = "routing",
    start: Position = Position(),
    solution_limit: int = DEFAULTS.routing_solution_limit,
) -> List[OptimizeItem]:
    """
    Return `items` in a low-travel visiting order.
    Set membership is preserved; identical input gives identical output.
    """
    items = list(items)
    if method not in METHODS:
        raise ValueError(f"Unknown optimizer method '{method}', expected one of {METHODS}")
    if len(items) <= 1:
        return items
    if method == "greedy":
        return _optimize_greedy(items, start)
    if solution_limit < 1:
        raise ValueError(f"solution_limit must be at least 1, got {solution_limit}")
    return _optimize_routing(items, start, solution_limit)
