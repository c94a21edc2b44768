"""Queue loop of Kahn's in-degree algorithm."""

from collections import deque
from collections.abc import Collection, Hashable, Iterable, Mapping, MutableMapping


def kahn_order[T: Hashable](
    successors: Mapping[T, Collection[T]],
    indegree: MutableMapping[T, int],
    seed: Iterable[T],
) -> list[T]:
    """Pop in-degree-0 nodes in FIFO order until the queue runs dry.

    ``indegree`` is consumed: every edge out of a popped node decrements its
    target, once per occurrence. ``seed`` gives the initial queue and must
    hold exactly the nodes whose in-degree is 0.

    Returns:
        The popped nodes in pop order. Shorter than the node count when the
        graph has a cycle.

    """
    queue = deque(seed)
    order: list[T] = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for successor in successors.get(node, ()):
            indegree[successor] -= 1
            if indegree[successor] == 0:
                queue.append(successor)

    return order
