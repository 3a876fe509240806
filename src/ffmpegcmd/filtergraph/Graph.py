from __future__ import annotations

from collections.abc import Iterable

from .abc import FilterGraphObject
from .Filter import Filter
from .Chain import Chain
from .exceptions import *


__all__ = ["Graph"]


class Graph(FilterGraphObject):
    """List of FFmpeg filterchains in parallel

    Graph() to instantiate empty Graph object

    Graph([chain0, chain1, ...]) to append the chains in order

    :param chains: filterchains (or single filters) to append, defaults to None
    :type chains: seq(Chain or Filter), optional

    Each chain is assigned its position in the graph when it is appended. The
    position is a part of its output pad labels and never changes.
    """

    def __init__(self, chains: Iterable[Chain | Filter] | None = None):
        self._chains: list[Chain] = []
        if chains is not None:
            if isinstance(chains, (Chain, Filter)):
                chains = [chains]
            for chain in chains:
                self.append(chain)

    def append(self, chain: Chain | Filter) -> Chain:
        """append a filterchain

        :param chain: filterchain. A Filter is wrapped in a new Chain.
        :return: the appended chain
        """
        if not isinstance(chain, (Chain, Filter)):
            raise FiltergraphInvalidObject("a Chain or Filter object", chain)
        chain = Chain.wrap(chain)
        chain._set_position(len(self._chains))
        self._chains.append(chain)
        return chain

    def extend(self, chains: Iterable[Chain | Filter]):
        for chain in chains:
            self.append(chain)

    def __len__(self):
        return len(self._chains)

    def __iter__(self):
        return iter(self._chains)

    def __getitem__(self, key):
        return self._chains[key]

    def __contains__(self, chain):
        return any(c is chain for c in self._chains)

    def pad_names(self) -> list[str]:
        """list of generated output pad labels (unbracketed)"""
        return [
            chain.pad_name(pad)
            for chain in self._chains
            for pad in chain.labeled_output_pads()
        ]

    def compose(self) -> str:
        """compose filtergraph expression ``chain0;chain1;...``

        An empty graph composes to an empty string.
        """
        return ";".join(chain.compose() for chain in self._chains)
