"""Storyboard resolution: the visible, ordered block list a public viewer sees.

A form's blocks arrive as a flat, unordered collection. Blocks may belong to a
group block through ``parent_block`` (the group's ``uuid``). Resolution:

1. Drop group blocks that no other block references as its parent.
2. Drop disabled blocks.
3. Drop blocks whose parent did not survive steps 1-2 (or never existed).

Step 3 is repeated until nothing else is removed, so a chain of nested groups
collapses the same way a single level does.
"""

from dataclasses import dataclass, field
from typing import Generic, Iterable, Protocol, TypeVar

from app.models.form_block import GROUP_BLOCK_TYPE


class BlockLike(Protocol):
    uuid: str
    type: str
    parent_block: str | None
    is_disabled: bool
    sequence: int


B = TypeVar("B", bound=BlockLike)


@dataclass
class Storyboard(Generic[B]):
    count: int = 0
    blocks: list[B] = field(default_factory=list)


def _referenced_parents(blocks: list[B]) -> set[str]:
    """Uuids named as ``parent_block`` by some block other than themselves."""
    return {b.parent_block for b in blocks if b.parent_block and b.parent_block != b.uuid}


def _is_empty_group(block: BlockLike, parents: set[str]) -> bool:
    return block.type == GROUP_BLOCK_TYPE and block.uuid not in parents


def _drop_orphans(blocks: list[B]) -> list[B]:
    while True:
        present = {b.uuid for b in blocks}
        kept = [b for b in blocks if not b.parent_block or b.parent_block in present]
        if len(kept) == len(blocks):
            return kept
        blocks = kept


def resolve_storyboard(blocks: Iterable[B]) -> Storyboard[B]:
    """Return the blocks a public viewer should see, ordered by ``sequence``.

    Never raises for dangling references: a child whose parent is missing is
    simply left out.
    """
    snapshot = list(blocks)
    parents = _referenced_parents(snapshot)

    visible = [b for b in snapshot if not _is_empty_group(b, parents) and not b.is_disabled]
    visible = _drop_orphans(visible)
    visible.sort(key=lambda b: b.sequence or 0)

    return Storyboard(count=len(visible), blocks=visible)
