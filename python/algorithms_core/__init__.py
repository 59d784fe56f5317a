"""Classical algorithmic building blocks: edit distance, substring search,
assignment and an ordered red-black tree container."""

import logging

from .exceptions import BoundsError, ConfigurationError
from .multiarray import MultiArray, MultiArrayView
from .edit_distance import (
    EditCosts,
    EditDistance,
    normalised_damerau_levenshtein_distance,
)
from .substring import NOT_FOUND, SubstringSearch, build_failure_table
from .assignment import (
    UNASSIGNED,
    AssignmentSolver,
    assignment_cost,
    linear_sum_assignment,
)
from .red_black_tree import (
    BLACK,
    RED,
    LinkedNode,
    Node,
    NodeColor,
    OrderedSet,
    RedBlackTree,
    color_of,
    natural_order,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BoundsError",
    "ConfigurationError",
    "MultiArray",
    "MultiArrayView",
    "EditCosts",
    "EditDistance",
    "normalised_damerau_levenshtein_distance",
    "NOT_FOUND",
    "SubstringSearch",
    "build_failure_table",
    "UNASSIGNED",
    "AssignmentSolver",
    "assignment_cost",
    "linear_sum_assignment",
    "BLACK",
    "RED",
    "LinkedNode",
    "Node",
    "NodeColor",
    "OrderedSet",
    "RedBlackTree",
    "color_of",
    "natural_order",
]
