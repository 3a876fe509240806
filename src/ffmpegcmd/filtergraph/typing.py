from __future__ import annotations

from typing import *
from typing_extensions import *


class Arity(NamedTuple):
    """Number of filter pads on one side of a filter or filterchain

    ``Arity.fixed(n)`` declares exactly ``n`` pads while ``Arity.UNBOUNDED``
    (``count=None``) accepts any number of pads, which FFmpeg documents as ``N``.
    """

    count: Optional[int]

    @classmethod
    def fixed(cls, count: int) -> Arity:
        if isinstance(count, bool) or not isinstance(count, int):
            raise TypeError(f"pad count must be an int, got {type(count).__name__}")
        if count < 0:
            raise ValueError(f"pad count must be non-negative, got {count}")
        return cls(count)

    @property
    def unbounded(self) -> bool:
        return self.count is None

    def accepts(self, n: int) -> bool:
        """True if ``n`` pads fit within this arity"""
        return self.count is None or n <= self.count

    def has_pad(self, index: int) -> bool:
        """True if the pad ``index`` exists"""
        return index >= 0 and (self.count is None or index < self.count)

    def __str__(self) -> str:
        return "N" if self.count is None else str(self.count)


Arity.UNBOUNDED = Arity(None)

ArityLike = Union[Arity, int, Literal["N"]]


def as_arity(value: ArityLike) -> Arity:
    """convert an arity-like value to :py:class:`Arity`

    :param value: ``Arity`` instance, non-negative int, or ``"N"`` for unbounded
    :return: arity object
    """
    if isinstance(value, Arity):
        return value
    if value == "N":
        return Arity.UNBOUNDED
    return Arity.fixed(value)
