"""Org hierarchy resolution: rebuild the reporting forest from flat employee records.

Nodes are owned by the forest's id index. Each node holds its direct reports
in input order and only a weak reference to its manager.
"""

import logging
import weakref
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from orgchart.hierarchy.models import EmployeeID, Record

logger = logging.getLogger(__name__)


class DuplicateEmployeeError(ValueError):
    """Raised in strict mode when two records share an employee id."""

    def __init__(self, employee_id: EmployeeID):
        self.employee_id = employee_id
        super().__init__(f"Duplicate employee id: {employee_id}")


class Node:
    """Tree position of a single employee."""

    __slots__ = ("record", "children", "_parent", "__weakref__")

    def __init__(self, record: Record):
        self.record = record
        self.children: list[Node] = []
        self._parent: weakref.ref[Node] | None = None

    @property
    def employee_id(self) -> EmployeeID:
        return self.record.id

    @property
    def parent(self) -> "Node | None":
        return self._parent() if self._parent is not None else None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def depth(self) -> int:
        """Number of managers between this node and its root (0 for roots)."""
        depth = 0
        current = self.parent
        while current is not None:
            depth += 1
            current = current.parent
        return depth

    def ancestors(self) -> Iterator["Node"]:
        """Yield the management chain from the direct manager up to the root."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def add_child(self, child: "Node") -> None:
        self.children.append(child)
        child._parent = weakref.ref(self)

    def __repr__(self) -> str:
        parent = self.parent
        return (
            f"Node(id={self.record.id!r}, "
            f"parent_id={parent.record.id if parent is not None else None!r}, "
            f"children={len(self.children)})"
        )


@dataclass
class Forest:
    """Reporting forest: an owning id index plus the ordered list of roots."""

    roots: list[Node] = field(default_factory=list)
    index: dict[EmployeeID, Node] = field(default_factory=dict)

    def all_nodes(self) -> list[Node]:
        """Every node, in index (first-seen id) order."""
        return list(self.index.values())

    @property
    def total_employee_count(self) -> int:
        return len(self.index)

    @property
    def root_node_count(self) -> int:
        return len(self.roots)

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self.index

    def __len__(self) -> int:
        return len(self.index)


def _would_create_cycle(node: Node, manager: Node) -> bool:
    """True if ``manager`` is ``node`` itself or already reports up to it."""
    if manager is node:
        return True
    return any(ancestor is node for ancestor in manager.ancestors())


def build_forest(records: Iterable[Record], strict_ids: bool = False) -> Forest:
    """Build a forest from records in two passes.

    Pass 1 indexes every record by id, later duplicates replacing earlier ones
    (or raising ``DuplicateEmployeeError`` when ``strict_ids``). Pass 2 links
    each indexed node to its manager in input order. A node whose manager id
    is unknown, or whose manager link would close a cycle, becomes a root.
    """
    records = list(records)
    forest = Forest()

    # Pass 1: index
    created: list[Node] = []
    for record in records:
        if record.id in forest.index:
            if strict_ids:
                raise DuplicateEmployeeError(record.id)
            logger.debug("Employee id %s seen again; later record replaces earlier", record.id)
        node = Node(record)
        forest.index[record.id] = node
        created.append(node)

    # Pass 2: link
    for node in created:
        if forest.index[node.employee_id] is not node:
            continue  # shadowed by a later duplicate

        manager_id = node.record.manager_id
        if manager_id is None:
            forest.roots.append(node)
            continue

        manager = forest.index.get(manager_id)
        if manager is None:
            logger.warning(
                "Manager with ID %s not found for employee %s; treating as root",
                manager_id,
                node.employee_id,
            )
            forest.roots.append(node)
        elif _would_create_cycle(node, manager):
            logger.warning(
                "Manager link %s -> %s would create a reporting cycle; treating as root",
                node.employee_id,
                manager_id,
            )
            forest.roots.append(node)
        else:
            manager.add_child(node)

    logger.info(
        "Resolved org hierarchy: %d nodes, %d root(s)",
        forest.total_employee_count,
        forest.root_node_count,
    )
    return forest


def iter_subordinates(node: Node) -> Iterator[Node]:
    """Pre-order walk of everything below ``node``, excluding ``node`` itself."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def get_direct_reports(forest: Forest, employee_id: EmployeeID) -> list[Node]:
    node = forest.index.get(employee_id)
    return list(node.children) if node is not None else []


def get_all_subordinates(forest: Forest, employee_id: EmployeeID) -> list[Node]:
    node = forest.index.get(employee_id)
    return list(iter_subordinates(node)) if node is not None else []


def compute_depths(forest: Forest) -> dict[EmployeeID, int]:
    """Depth of every node, computed top-down from the roots in one pass."""
    depths: dict[EmployeeID, int] = {}
    for root in forest.roots:
        depths[root.employee_id] = 0
        for node in iter_subordinates(root):
            depths[node.employee_id] = depths[node.parent.employee_id] + 1
    return depths


class OrgTree:
    """Holder for the current forest plus navigation queries over it.

    ``build_tree`` swaps in a freshly built forest; it never merges with the
    previous one. Callers that need the old structure must keep a reference
    to ``forest`` before rebuilding.
    """

    def __init__(self, strict_ids: bool = False):
        self.strict_ids = strict_ids
        self.forest = Forest()
        self._depths: dict[EmployeeID, int] | None = None

    def build_tree(self, records: Iterable[Record]) -> Forest:
        self.forest = build_forest(records, strict_ids=self.strict_ids)
        self._depths = None
        return self.forest

    def get_node_by_id(self, employee_id: EmployeeID) -> Node | None:
        return self.forest.index.get(employee_id)

    def get_root_nodes(self) -> list[Node]:
        return list(self.forest.roots)

    def get_all_nodes(self) -> list[Node]:
        return self.forest.all_nodes()

    def get_direct_reports(self, employee_id: EmployeeID) -> list[Node]:
        return get_direct_reports(self.forest, employee_id)

    def get_all_subordinates(self, employee_id: EmployeeID) -> list[Node]:
        return get_all_subordinates(self.forest, employee_id)

    def get_depth(self, node: Node) -> int:
        """Depth of ``node``; cached per build for nodes of the current forest."""
        if self.forest.index.get(node.employee_id) is not node:
            return node.depth
        if self._depths is None:
            self._depths = compute_depths(self.forest)
        return self._depths[node.employee_id]

    def get_total_employee_count(self) -> int:
        return self.forest.total_employee_count

    def get_root_node_count(self) -> int:
        return self.forest.root_node_count

    def __iter__(self) -> Iterator[Node]:
        return iter(self.forest.all_nodes())

    def __len__(self) -> int:
        return len(self.forest)
