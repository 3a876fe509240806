from __future__ import annotations

"""ffmpegcmd.filtergraph module - FFmpeg filtergraph classes

    Filter      one filter with its options and pad counts (arities)
    Chain       filters connected in series; inputs are bound by stream specifiers
    Graph       filterchains in parallel, composed to a ``-filter_complex`` value

Pad Labeling
============

Pad labels are never given by hand. An input pad of a chain is labeled by the
stream specifier bound to it (``[0:v]`` for an input stream or
``[chain1_split_0]`` for an output of another chain). An output pad of a chain
is labeled ``chain{position}_{last filter name}_{pad index}`` only if some
stream specifier references it; otherwise FFmpeg links it implicitly.

.. code-block::python

    fg = Graph()
    chain = fg.append(Chain([Filter("scale", {"w": 640, "h": -2}), Filter("hflip")]))
    chain.add_input(video_in.stream("v"))
    out = chain.output_pad()
    str(fg)  # '[0:v]scale=w=640:h=-2,hflip[chain0_hflip_0]'

"""

from . import abc
from .typing import Arity, as_arity
from .Filter import Filter
from .Chain import Chain
from .Graph import Graph
from .exceptions import (
    FiltergraphError,
    FiltergraphConstructionError,
    FiltergraphInvalidObject,
    FiltergraphArityError,
    FiltergraphInvalidIndex,
    FiltergraphDuplicatePadError,
)

__all__ = [
    "abc",
    "Arity",
    "as_arity",
    "Filter",
    "Chain",
    "Graph",
    "FiltergraphError",
    "FiltergraphConstructionError",
    "FiltergraphInvalidObject",
    "FiltergraphArityError",
    "FiltergraphInvalidIndex",
    "FiltergraphDuplicatePadError",
]
