from collections.abc import Iterable, Iterator

from .model import BlockResult, CompiledBlock


def flatten(results: Iterable[BlockResult]) -> list[CompiledBlock]:
    """
    Collapse nested block results into document order.

    Each block is immediately followed by its own descendants (pre-order),
    before the next sibling.
    """
    return list(_walk(results))


def _walk(results: Iterable[BlockResult]) -> Iterator[CompiledBlock]:
    for result in results:
        yield result.block
        yield from _walk(result.children)
