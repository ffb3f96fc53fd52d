import numpy as np
import pytest

from LBG_VQ.quant.distance import nearest
from LBG_VQ.quant.lbg import LBGState, build_codebook, refine, split_codewords


def _blocks(values):
    return np.asarray(values, dtype=np.float32).reshape(-1, 1, 1)


def test_split_floor_and_ceil():
    cw = np.array([[[2.5, 3.0]]], np.float32)
    kids = split_codewords(cw)
    assert kids.shape == (2, 1, 2)
    assert kids[0].tolist() == [[2.0, 2.0]]
    assert kids[1].tolist() == [[3.0, 4.0]]


def test_split_keeps_parent_order():
    kids = split_codewords(_blocks([1.5, 7.5]))
    assert kids.ravel().tolist() == [1.0, 2.0, 7.0, 8.0]


def test_refine_drops_empty_codeword():
    blocks = _blocks([0, 1, 2])
    new, labels = refine(blocks, _blocks([1, 50]))
    assert labels.tolist() == [0, 0, 0]
    assert new.ravel().tolist() == [1.0]


def test_two_clusters():
    st = build_codebook(LBGState(_blocks([0, 0, 10, 10]), 2))
    assert st.codewords.ravel().tolist() == [0.0, 10.0]
    assert st.labels.tolist() == [0, 0, 1, 1]
    assert st.converged
    assert st.splits == 1


def test_size_is_power_of_two_reached_by_splitting():
    blocks = _blocks([0, 0, 100, 100, 200, 200, 300, 300])
    st = build_codebook(LBGState(blocks, 3))
    assert st.codewords.ravel().tolist() == [0.0, 100.0, 200.0, 300.0]
    assert st.labels.tolist() == [0, 0, 1, 1, 2, 2, 3, 3]
    assert st.splits == 2


def test_identical_blocks_stop_splitting():
    st = build_codebook(LBGState(_blocks([100] * 4), 4))
    assert len(st.codewords) == 1
    assert st.codewords.ravel().tolist() == [100.0]
    assert st.labels.tolist() == [0, 0, 0, 0]


def test_labels_are_nearest_to_final_codebook():
    rng = np.random.default_rng(11)
    blocks = rng.uniform(0, 255, (120, 2, 2)).astype(np.float32)
    st = build_codebook(LBGState(blocks, 8, max_iterations=2))
    assert st.iterations <= 2
    assert np.array_equal(st.labels, nearest(blocks, st.codewords))


def test_deterministic():
    rng = np.random.default_rng(5)
    blocks = rng.uniform(0, 255, (150, 2, 2)).astype(np.float32)
    a = build_codebook(LBGState(blocks, 8))
    b = build_codebook(LBGState(blocks.copy(), 8))
    assert np.array_equal(a.codewords, b.codewords)
    assert np.array_equal(a.labels, b.labels)


def test_custom_search_is_used():
    calls = []

    def search(blocks, codewords):
        calls.append(len(codewords))
        return nearest(blocks, codewords)

    build_codebook(LBGState(_blocks([0, 0, 10, 10]), 2, search=search))
    assert calls and calls[0] == 2


@pytest.mark.parametrize("n,iters", [(0, 10), (2, 0)])
def test_bad_parameters(n, iters):
    with pytest.raises(ValueError):
        build_codebook(LBGState(_blocks([1, 2]), n, max_iterations=iters))


def test_iteration_cap_keeps_last_codebook():
    from loguru import logger

    records = []
    sink = logger.add(lambda m: records.append(m.record), level="WARNING")
    try:
        st = build_codebook(LBGState(_blocks([0, 0, 0, 0, 7, 30]), 2, max_iterations=1))
    finally:
        logger.remove(sink)

    assert st.converged is False
    assert st.iterations == 1
    assert np.array_equal(st.codewords.ravel(), np.array([1.4, 30.0], np.float32))
    assert st.labels.tolist() == [0, 0, 0, 0, 0, 1]
    assert np.array_equal(st.labels, nearest(_blocks([0, 0, 0, 0, 7, 30]), st.codewords))
    assert any("no convergence" in r["message"] for r in records)


def test_same_input_converges_without_cap():
    st = build_codebook(LBGState(_blocks([0, 0, 0, 0, 7, 30]), 2, max_iterations=5))
    assert st.converged
    assert st.iterations == 2
