"""
Graph Evaluator

Evaluates an effect graph into expressions. Nodes are evaluated in
topological order so that every linked input already has an expression
when its node is evaluated.
"""

from collections import deque
from typing import Dict, Iterable, List, Optional, Set
import logging

from ..expr.errors import GraphEvalError
from ..expr.module import ExprHandle, Module
from ..graph.graph import Graph
from ..graph.node import NodeId, SlotId

logger = logging.getLogger(__name__)


class GraphEvaluator:
    """
    Evaluates graph nodes in topological order.

    The evaluator:
    1. Builds node dependencies from the graph links
    2. Validates no cycles exist (using DFS)
    3. Computes topological order (using Kahn's algorithm)
    4. Calls each node's eval() with the expressions of its linked inputs
       and binds the returned expressions to its output slots

    Unlinked input slots are skipped, so a node with a missing input reports
    an arity mismatch through GraphEvalError.

    Example usage:
        evaluator = GraphEvaluator(graph)
        values = evaluator.evaluate(module)

        code = ShaderWriter().eval(module, values[result_slot])
    """

    def __init__(self, graph: Graph):
        self.graph = graph
        self.dependencies: Dict[NodeId, List[NodeId]] = {}
        self.dependents: Dict[NodeId, Set[NodeId]] = {}
        self.topo_order: List[NodeId] = []
        self.slot_values: Dict[SlotId, ExprHandle] = {}

    def build(self) -> None:
        """
        Compute dependencies and evaluation order.

        Raises:
            GraphEvalError: If the graph links contain a cycle
        """
        self._build_dependencies()
        self._validate_no_cycles()
        self._compute_topo_order()
        logger.debug(f"Evaluation order: {[n.id for n in self.topo_order]}")

    def evaluate(
        self, module: Module, targets: Optional[Iterable[SlotId]] = None
    ) -> Dict[SlotId, ExprHandle]:
        """
        Evaluate the graph.

        The evaluation order is recomputed on every call, so links edited
        since a previous evaluation are taken into account.

        Args:
            module: Module receiving the expressions built by the nodes
            targets: Output slots needed by the caller. Only the nodes they
                depend on are evaluated. Default: all nodes.

        Returns:
            Mapping from output slot to its expression

        Raises:
            GraphEvalError: On cycles, arity mismatches, or nodes returning a
                wrong number of outputs
        """
        self.build()

        if targets is None:
            required = None
        else:
            required = self._required_nodes(targets)

        self.slot_values = {}
        for node_id in self.topo_order:
            if required is None or node_id in required:
                self._evaluate_node(module, node_id)

        logger.info(
            f"Evaluated {len(self.topo_order) if required is None else len(required)} "
            f"nodes into {len(self.slot_values)} output expressions"
        )
        return dict(self.slot_values)

    def output_handle(self, slot_id: SlotId) -> ExprHandle:
        """
        Get the expression of an output slot from the last evaluation.

        Raises:
            GraphEvalError: If the slot was not evaluated
        """
        try:
            return self.slot_values[slot_id]
        except KeyError:
            raise GraphEvalError(f"Slot {slot_id.id} has no evaluated expression") from None

    def _build_dependencies(self) -> None:
        self.dependencies = {}
        self.dependents = {}

        for node_id in self.graph.node_ids():
            deps: List[NodeId] = []
            for input_id in self.graph.input_slots(node_id):
                source = self.graph.source_slot(input_id)
                if source is None:
                    continue
                dep = self.graph.get_slot(source).node_id
                if dep not in deps:
                    deps.append(dep)

            self.dependencies[node_id] = deps
            for dep in deps:
                self.dependents.setdefault(dep, set()).add(node_id)

    def _validate_no_cycles(self) -> None:
        """
        Detect cycles using depth-first search.

        The search keeps its own stack of dependency iterators, so long node
        chains do not hit the interpreter recursion limit.

        Raises:
            GraphEvalError: If a cycle is detected, naming the nodes involved
        """
        visited: Set[NodeId] = set()

        for start in self.dependencies:
            if start in visited:
                continue

            visited.add(start)
            path: List[NodeId] = [start]
            on_path: Set[NodeId] = {start}
            pending = [iter(self.dependencies.get(start, []))]

            while pending:
                dep = next(pending[-1], None)
                if dep is None:
                    pending.pop()
                    on_path.discard(path.pop())
                elif dep in on_path:
                    cycle = path[path.index(dep):] + [dep]
                    raise GraphEvalError(
                        f"Cycle detected in graph: {' -> '.join(str(n.id) for n in cycle)}"
                    )
                elif dep not in visited:
                    visited.add(dep)
                    path.append(dep)
                    on_path.add(dep)
                    pending.append(iter(self.dependencies.get(dep, [])))

    def _compute_topo_order(self) -> None:
        # Number of unevaluated dependencies per node
        remaining = {n: len(deps) for n, deps in self.dependencies.items()}
        queue = deque(n for n, count in remaining.items() if count == 0)
        self.topo_order = []

        while queue:
            node_id = queue.popleft()
            self.topo_order.append(node_id)

            for dependent in sorted(self.dependents.get(node_id, ()), key=lambda n: n.id):
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    queue.append(dependent)

        if len(self.topo_order) != len(self.dependencies):
            missing = sorted(n.id for n in set(self.dependencies) - set(self.topo_order))
            raise GraphEvalError(f"Topological sort failed, unordered nodes: {missing}")

    def _required_nodes(self, targets: Iterable[SlotId]) -> Set[NodeId]:
        required: Set[NodeId] = set()
        stack = [self.graph.get_slot(slot_id).node_id for slot_id in targets]

        while stack:
            node_id = stack.pop()
            if node_id in required:
                continue
            required.add(node_id)
            stack.extend(self.dependencies.get(node_id, []))

        return required

    def _evaluate_node(self, module: Module, node_id: NodeId) -> None:
        node = self.graph.get_node(node_id)

        inputs: List[ExprHandle] = []
        for input_id in self.graph.input_slots(node_id):
            source = self.graph.source_slot(input_id)
            if source is None:
                logger.debug(
                    f"Node {node_id.id} input '{self.graph.get_slot(input_id).name}' is not linked"
                )
                continue
            inputs.append(self.slot_values[source])

        outputs = node.eval(module, inputs)

        output_ids = self.graph.output_slots(node_id)
        if len(outputs) != len(output_ids):
            raise GraphEvalError(
                f"Node {node_id.id} ({type(node).__name__}) returned {len(outputs)} "
                f"outputs, expected {len(output_ids)}"
            )

        for slot_id, handle in zip(output_ids, outputs):
            self.slot_values[slot_id] = handle

        logger.debug(f"Evaluated node {node_id.id} ({type(node).__name__})")
