import logging

import pytest

from ffmpegcmd import filtergraph as fgb
from ffmpegcmd import Command, Input, PadAlreadyMappedError
from ffmpegcmd.filtergraph import Arity


@pytest.fixture
def inputs():
    cmd = Command()
    ins = [Input(f"in{i}.mp4") for i in range(3)]
    for i in ins:
        cmd.add_input(i)
    return ins


def test_construction():
    chain = fgb.Chain([fgb.Filter("scale", {"w": 640, "h": -2}), fgb.Filter("hflip")])
    assert len(chain) == 2
    assert chain[1].name == "hflip"
    assert [f.name for f in chain] == ["scale", "hflip"]
    assert chain.input_node.name == "scale"
    assert chain.output_node.name == "hflip"
    assert chain.position is None
    assert chain.compose() == "scale=w=640:h=-2,hflip"

    assert fgb.Chain(fgb.Filter("hflip")).compose() == "hflip"


@pytest.mark.parametrize(
    "filters, error",
    [
        ([], fgb.FiltergraphConstructionError),
        ((), fgb.FiltergraphConstructionError),
        ("hflip", fgb.FiltergraphInvalidObject),
        (["hflip"], fgb.FiltergraphInvalidObject),
        ([fgb.Filter("hflip"), None], fgb.FiltergraphInvalidObject),
        (None, fgb.FiltergraphInvalidObject),
    ],
)
def test_construction_errors(filters, error):
    with pytest.raises(error):
        fgb.Chain(filters)


def test_wrap():
    f = fgb.Filter("hflip")
    chain = fgb.Chain.wrap(f)
    assert isinstance(chain, fgb.Chain)
    assert chain.filters == (f,)
    assert fgb.Chain.wrap(chain) is chain
    with pytest.raises(fgb.FiltergraphInvalidObject):
        fgb.Chain.wrap("hflip")


def test_arity_from_end_nodes():
    chain = fgb.Chain(
        [
            fgb.Filter("hstack", {"inputs": 2}, input_arity=2),
            fgb.Filter("split", {"outputs": 3}, output_arity=3),
        ]
    )
    assert chain.input_arity == Arity.fixed(2)
    assert chain.output_arity == Arity.fixed(3)

    chain.append_nodes(fgb.Filter("hflip"))
    assert chain.output_arity == Arity.fixed(1)
    chain.prepend_nodes(fgb.Filter("concat", {"n": 4}, input_arity="N"))
    assert chain.input_arity == Arity.UNBOUNDED
    assert chain.compose() == "concat=n=4,hstack=inputs=2,split=outputs=3,hflip"


def test_too_many_inputs(inputs):
    chain = fgb.Chain(fgb.Filter("hstack", input_arity=2))
    chain.add_input(inputs[0].stream("v"))
    chain.add_input(inputs[1].stream("v"))
    with pytest.raises(fgb.FiltergraphArityError):
        chain.add_input(inputs[2].stream("v"))
    assert len(chain.inputs) == 2

    chain = fgb.Chain(fgb.Filter("hstack", input_arity=2))
    with pytest.raises(fgb.FiltergraphArityError):
        chain.add_inputs([i.stream("v") for i in inputs])
    assert chain.inputs == ()


def test_unbounded_inputs(inputs):
    chain = fgb.Chain(fgb.Filter("amix", input_arity="N"))
    specs = [inputs[i % 3].stream("a") for i in range(10)]
    chain.add_inputs(specs)
    assert chain.inputs == tuple(specs)


def test_invalid_inputs(inputs):
    chain = fgb.Chain(fgb.Filter("hflip"))
    with pytest.raises(fgb.FiltergraphInvalidObject):
        chain.add_input("0:v")
    with pytest.raises(fgb.FiltergraphInvalidObject):
        chain.add_inputs(inputs[0].stream("v"))
    with pytest.raises(fgb.FiltergraphInvalidObject):
        chain.add_inputs([inputs[0]])


def test_underconnected_warning(inputs, caplog):
    chain = fgb.Chain(fgb.Filter("overlay", input_arity=2))
    with caplog.at_level(logging.WARNING, logger="ffmpegcmd"):
        chain.add_input(inputs[0].stream("v"))
    assert "Not enough inputs" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="ffmpegcmd"):
        chain.add_input(inputs[1].stream("v"))
    assert "Not enough inputs" not in caplog.text
    assert chain.compose() == "[0:v][1:v]overlay"


def test_prepend_arity_check(inputs):
    chain = fgb.Chain(fgb.Filter("hstack", input_arity=2))
    chain.add_inputs([inputs[0].stream("v"), inputs[1].stream("v")])
    with pytest.raises(fgb.FiltergraphArityError):
        chain.prepend_nodes(fgb.Filter("hflip"))
    assert chain.input_node.name == "hstack"


def test_append_arity_check():
    fg = fgb.Graph()
    chain = fg.append(fgb.Filter("split", output_arity=2))
    chain.output_pad(1)
    with pytest.raises(fgb.FiltergraphArityError):
        chain.append_nodes(fgb.Filter("hflip"))
    chain.append_nodes(fgb.Filter("asplit", output_arity="N"))
    assert chain.output_node.name == "asplit"


def test_output_pad_labels():
    fg = fgb.Graph()
    chain = fg.append(fgb.Chain([fgb.Filter("hflip"), fgb.Filter("split", output_arity=3)]))
    assert chain.compose() == "hflip,split"
    assert chain.labeled_output_pads() == range(0)

    spec = chain.output_pad(2)
    assert chain.consumers(2) == 1
    assert chain.consumers(0) == 0
    # lower pads are labeled as well
    assert (
        chain.compose() == "hflip,split[chain0_split_0][chain0_split_1][chain0_split_2]"
    )
    assert spec.compose() == "[chain0_split_2]"


@pytest.mark.parametrize("pad", [3, -1, "x", 1.0, True])
def test_output_pad_out_of_range(pad):
    fg = fgb.Graph()
    chain = fg.append(fgb.Filter("split", output_arity=3))
    with pytest.raises(fgb.FiltergraphInvalidIndex):
        chain.output_pad(pad)
    assert chain.labeled_output_pads() == range(0)


def test_output_pad_str_index():
    fg = fgb.Graph()
    chain = fg.append(fgb.Filter("split", output_arity=3))
    assert chain.output_pad("1").pad == 1


def test_no_output_pad():
    fg = fgb.Graph()
    chain = fg.append(fgb.Filter("nullsink", output_arity=0))
    with pytest.raises(fgb.FiltergraphInvalidIndex):
        chain.output_pad()


def test_default_output_pad():
    fg = fgb.Graph()
    chain = fg.append(fgb.Filter("split", output_arity=2))
    assert chain.resolve_output_pad() == 0
    chain.mark_output_pad_mapped(0)
    assert chain.is_mapped(0)
    assert chain.resolve_output_pad() == 1
    chain.mark_output_pad_mapped(1)
    with pytest.raises(PadAlreadyMappedError):
        chain.resolve_output_pad()


def test_mark_mapped_once():
    chain = fgb.Chain(fgb.Filter("hflip"))
    chain.mark_output_pad_mapped(0)
    with pytest.raises(PadAlreadyMappedError):
        chain.mark_output_pad_mapped(0)


def test_pad_name_requires_position():
    chain = fgb.Chain(fgb.Filter("hflip"))
    spec = chain.output_pad()
    with pytest.raises(fgb.FiltergraphConstructionError):
        chain.compose()
    with pytest.raises(fgb.FiltergraphConstructionError):
        spec.compose()

    fgb.Graph().append(chain)
    assert spec.compose() == "[chain0_hflip_0]"


def test_chain_to_chain(inputs):
    fg = fgb.Graph()
    split = fg.append(fgb.Filter("split", output_arity=2))
    split.add_input(inputs[0].stream("v"))
    overlay = fg.append(fgb.Filter("overlay", input_arity=2))
    overlay.add_inputs([split.output_pad(0), split.output_pad(1)])

    assert split.compose() == "[0:v]split[chain0_split_0][chain0_split_1]"
    assert overlay.compose() == "[chain0_split_0][chain0_split_1]overlay"


def test_default_output_pad_skips_bound_pads(inputs):
    fg = fgb.Graph()
    split = fg.append(fgb.Filter("split", output_arity=2))
    split.add_input(inputs[0].stream("v"))
    hflip = fg.append(fgb.Filter("hflip"))
    vflip = fg.append(fgb.Filter("vflip"))
    hflip.add_input(split.output_pad())
    vflip.add_input(split.output_pad())

    assert fg.compose() == (
        "[0:v]split[chain0_split_0][chain0_split_1];"
        "[chain0_split_0]hflip;"
        "[chain0_split_1]vflip"
    )
    assert split.is_bound(0) and split.is_bound(1)
    with pytest.raises(PadAlreadyMappedError):
        split.output_pad()


def test_output_pad_consumed_once():
    fg = fgb.Graph()
    split = fg.append(fgb.Filter("split", output_arity=2))
    hflip = fg.append(fgb.Filter("hflip"))
    vflip = fg.append(fgb.Filter("vflip"))
    spec = split.output_pad(0)
    hflip.add_input(spec)

    # bound pad cannot feed another chain or be mapped
    with pytest.raises(PadAlreadyMappedError):
        vflip.add_input(spec)
    with pytest.raises(PadAlreadyMappedError):
        split.mark_output_pad_mapped(0)
    assert vflip.inputs == ()

    overlay = fg.append(fgb.Filter("overlay", input_arity=2))
    with pytest.raises(PadAlreadyMappedError):
        overlay.add_inputs([split.output_pad(1), split.output_pad(1)])
    assert overlay.inputs == ()
    assert not split.is_bound(1)

    # mapped pad cannot be bound
    split.mark_output_pad_mapped(1)
    with pytest.raises(PadAlreadyMappedError):
        vflip.add_input(split.output_pad(1))
