from __future__ import annotations

import numpy as np
import pytest

from rps_network import api
from rps_network.errors import ContractViolation, InvalidDimension, OutOfRange
from rps_network.math_utils import softmax
from rps_network.nn.model import Network, forward_pass
from rps_network.schemas import NetworkConfig


@pytest.mark.parametrize(
    "input_size,history_size,hidden_size,output_size",
    [(3, 3, 8, 3), (6, 5, 40, 3), (1, 1, 1, 2), (4, 1, 7, 5)],
)
def test_parameter_shapes(input_size, history_size, hidden_size, output_size):
    net = Network(input_size, history_size, hidden_size, output_size, seed=0)
    p = net.params

    assert p.W1.shape == (input_size * history_size, hidden_size)
    assert p.b1.shape == (hidden_size,)
    assert p.W2.shape == (hidden_size, output_size)
    assert p.b2.shape == (output_size,)
    assert len(net.history) == input_size * history_size


def test_initial_state():
    net = Network(3, 3, 8, 3, seed=0)

    assert not net.has_forward_cache
    assert net.snapshot is None
    np.testing.assert_allclose(net.probs(), [1 / 3, 1 / 3, 1 / 3])
    assert not net.params.b1.any()
    assert not net.params.b2.any()
    assert not net.history.flat().any()


def test_uniform_init_stays_in_small_symmetric_range():
    net = Network(6, 5, 40, 3, seed=1)
    for w in (net.params.W1, net.params.W2):
        assert np.all(np.abs(w) <= 0.1)
        assert w.std() > 0


def test_normal_init_uses_standard_normal_scale():
    net = Network(20, 5, 50, 10, seed=1, init="normal")
    assert 0.8 < net.params.W1.std() < 1.2


def test_unknown_init_is_rejected():
    with pytest.raises(ValueError, match="Unsupported init"):
        Network(3, 3, 8, 3, init="xavier")


@pytest.mark.parametrize("sizes", [(0, 3, 8, 3), (3, 0, 8, 3), (3, 3, 0, 3), (3, 3, 8, 0), (3, 3, 8, -1)])
def test_non_positive_sizes_are_rejected(sizes):
    with pytest.raises(InvalidDimension):
        Network(*sizes)


@pytest.mark.parametrize("init", ["uniform", "normal"])
def test_probs_form_a_distribution_after_every_forward(init):
    net = Network(6, 5, 40, 3, seed=3, init=init)
    rng = np.random.default_rng(0)
    for _ in range(50):
        net.forward(rng.normal(0.0, 3.0, size=6))
        p = net.probs()
        assert np.all(p >= 0)
        assert abs(p.sum() - 1.0) < 1e-5


def test_softmax_is_shift_invariant_and_stable():
    z = np.array([0.5, -1.25, 3.0, 0.0])
    np.testing.assert_allclose(softmax(z), softmax(z + 7.5), atol=1e-12)
    np.testing.assert_allclose(softmax(z), softmax(z - 1000.0), atol=1e-12)

    big = softmax(np.array([1000.0, 1000.0, -1000.0]))
    assert np.all(np.isfinite(big))
    np.testing.assert_allclose(big, [0.5, 0.5, 0.0], atol=1e-12)


def test_shifting_output_bias_leaves_probs_unchanged():
    net = Network(3, 2, 4, 3, seed=5)
    net.forward([1, 0, 0])
    history = net.history.flat()

    before = forward_pass(history, net.params)
    shifted = net.params.copy()
    shifted.b2 += 42.0
    after = forward_pass(history, shifted)

    np.testing.assert_allclose(after.logits, before.logits + 42.0)
    np.testing.assert_allclose(after.probs, before.probs, atol=1e-12)


def test_forward_rejects_wrong_input_length():
    net = Network(3, 3, 8, 3, seed=0)
    with pytest.raises(InvalidDimension):
        net.forward([1, 0])
    assert not net.has_forward_cache


@pytest.mark.parametrize("bad", [[float("inf"), 0, 0], [0, float("nan"), 0], [0, 0, -float("inf")]])
def test_forward_rejects_non_finite_input(bad):
    net = Network(3, 3, 8, 3, seed=0)
    params = net.params.copy()
    with pytest.raises(OutOfRange):
        net.forward(bad)
    assert not net.has_forward_cache
    assert net.history.flat().tolist() == [0.0] * 9
    np.testing.assert_array_equal(net.params.W1, params.W1)
    assert np.isfinite(net.probs()).all()


@pytest.mark.parametrize("label", [3, -1, 100])
def test_backward_rejects_out_of_range_label(label):
    net = Network(3, 3, 8, 3, seed=0)
    net.forward([1, 0, 0])
    with pytest.raises(OutOfRange):
        net.backward(label, 0.01)


@pytest.mark.parametrize("label", [True, 1.0, "1"])
def test_backward_rejects_non_integer_label(label):
    net = Network(3, 3, 8, 3, seed=0)
    net.forward([1, 0, 0])
    with pytest.raises(OutOfRange):
        net.backward(label, 0.01)


@pytest.mark.parametrize("lr", [0.0, -0.1, float("nan"), float("inf"), "fast", None, True])
def test_backward_rejects_bad_learning_rate(lr):
    net = Network(3, 3, 8, 3, seed=0)
    net.forward([1, 0, 0])
    W1 = net.params.W1.copy()
    with pytest.raises(OutOfRange):
        net.backward(1, lr)
    np.testing.assert_array_equal(net.params.W1, W1)


def test_backward_before_forward_is_a_contract_violation():
    net = Network(3, 3, 8, 3, seed=0)
    with pytest.raises(ContractViolation):
        net.backward(0, 0.01)


def test_label_is_checked_before_the_forward_cache():
    net = Network(3, 3, 8, 3, seed=0)
    with pytest.raises(OutOfRange):
        net.backward(3, 0.01)


def test_numpy_integer_label_is_accepted():
    net = Network(3, 3, 8, 3, seed=0)
    net.forward([1, 0, 0])
    net.backward(np.int64(2), 0.01)


def test_same_seed_gives_identical_prob_sequences():
    def run(seed: int) -> list[np.ndarray]:
        net = Network(6, 5, 40, 3, seed=seed)
        out = []
        for t in range(30):
            x = np.zeros(6)
            x[t % 3] = 1.0
            x[3 + (t * 7) % 3] = 1.0
            net.forward(x)
            out.append(net.probs())
            net.backward((t * 5) % 3, 0.1)
        return out

    a, b = run(11), run(11)
    for pa, pb in zip(a, b):
        np.testing.assert_array_equal(pa, pb)

    c = run(12)
    assert any(not np.array_equal(pa, pc) for pa, pc in zip(a, c))


def test_injected_generator_matches_seed():
    a = Network(3, 3, 8, 3, seed=9)
    b = Network(3, 3, 8, 3, rng=np.random.default_rng(9))
    np.testing.assert_array_equal(a.params.W1, b.params.W1)
    np.testing.assert_array_equal(a.params.W2, b.params.W2)


def test_from_config_round_trips_config():
    cfg = NetworkConfig(input_size=6, history_size=2, hidden_size=4, output_size=3, init="normal", seed=4)
    net = Network.from_config(cfg)
    assert net.config == cfg
    assert net.config.to_dict()["init"] == "normal"
    np.testing.assert_array_equal(net.params.W1, Network(6, 2, 4, 3, seed=4, init="normal").params.W1)


def test_predict_is_argmax_of_probs():
    net = Network(3, 1, 4, 3, seed=0)
    net.forward([0, 1, 0])
    assert net.predict() == int(np.argmax(net.probs()))


def test_probs_returns_a_copy():
    net = Network(3, 1, 4, 3, seed=0)
    net.forward([0, 1, 0])
    p = net.probs()
    p[:] = 0.0
    assert net.probs().sum() == pytest.approx(1.0)


def test_procedural_surface():
    net = api.construct(3, 3, 8, 3, seed=0)
    assert api.probs(net) == pytest.approx([1 / 3] * 3)

    api.forward(net, [1, 0, 0])
    p = api.probs(net)
    assert isinstance(p, list) and len(p) == 3
    assert sum(p) == pytest.approx(1.0, abs=1e-5)

    api.backward(net, 1, 0.01)
    with pytest.raises(OutOfRange):
        api.backward(net, 3, 0.01)
