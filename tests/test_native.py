import sys
import types

import pytest

from siphashcore import native_acceleration_active, siphash
from siphashcore import state as state_module


def _install_fake_native(monkeypatch, compress):
    fake = types.ModuleType("siphashcore._native")
    fake.compress = compress
    monkeypatch.setitem(sys.modules, "siphashcore._native", fake)


def test_native_acceleration_active_is_bool():
    assert isinstance(native_acceleration_active(), bool)


def test_embedded_env_forces_portable_round(monkeypatch):
    monkeypatch.setenv("SIPHASH_STATE_IMPL", "EMBEDDED")
    _install_fake_native(monkeypatch, state_module._portable_compress)
    compress_fn, active = state_module._select_compress()
    assert compress_fn is state_module._portable_compress
    assert active is False


def test_missing_native_module_falls_back(monkeypatch):
    monkeypatch.delenv("SIPHASH_STATE_IMPL", raising=False)
    # A None entry makes the import raise ImportError.
    monkeypatch.setitem(sys.modules, "siphashcore._native", None)
    compress_fn, active = state_module._select_compress()
    assert compress_fn is state_module._portable_compress
    assert active is False


def test_equivalent_native_loop_is_selected(monkeypatch):
    monkeypatch.delenv("SIPHASH_STATE_IMPL", raising=False)

    def candidate(state, n):
        return state_module._portable_compress(state, n)

    _install_fake_native(monkeypatch, candidate)
    compress_fn, active = state_module._select_compress()
    assert compress_fn is candidate
    assert active is True


def test_mismatching_native_loop_is_rejected(monkeypatch):
    monkeypatch.delenv("SIPHASH_STATE_IMPL", raising=False)

    def broken(state, n):
        v0, v1, v2, v3 = state_module._portable_compress(state, n)
        return v0, v1, v2, v3 ^ (n > 2)

    _install_fake_native(monkeypatch, broken)
    compress_fn, active = state_module._select_compress()
    assert compress_fn is state_module._portable_compress
    assert active is False


def test_failing_native_loop_is_rejected(monkeypatch):
    monkeypatch.delenv("SIPHASH_STATE_IMPL", raising=False)

    def failing(state, n):
        raise RuntimeError("compilation failed")

    _install_fake_native(monkeypatch, failing)
    compress_fn, active = state_module._select_compress()
    assert compress_fn is state_module._portable_compress
    assert active is False


def test_compress_hands_whole_loop_to_selected_impl(monkeypatch):
    calls = []

    def counting(state, n):
        calls.append(n)
        return state_module._portable_compress(state, n)

    monkeypatch.setattr(state_module, "_compress", counting)
    state_module.compress((1, 2, 3, 4), 3)
    state_module.sip_round((1, 2, 3, 4))
    state_module.compress((1, 2, 3, 4), 0)
    assert calls == [3, 1]


CORPUS = [
    (bytes(range(16)), b""),
    (bytes(range(16)), b"a"),
    (b"\x00" * 16, b"hello world"),
    (b"\xff" * 16, b"\xff" * 64),
    (bytes(range(16, 32)), bytes(range(255))),
    (b"0123456789abcdef", b"The quick brown fox jumps over the lazy dog"),
]

STATES = [
    (0x0123456789ABCDEF, 0xFFFFFFFFFFFFFFFF, 0, 0x8000000000000000),
    (0x736F6D6570736575, 0x646F72616E646F6D, 0x6C7967656E657261, 0x7465646279746573),
    (0xFFFFFFFFFFFFFFFF,) * 4,
]


@pytest.mark.parametrize("n", range(9))
def test_native_compress_matches_portable_compress(n):
    native = pytest.importorskip("siphashcore._native")
    for state in STATES:
        assert native.compress(state, n) == state_module._portable_compress(state, n)


@pytest.mark.parametrize("key, message", CORPUS)
def test_native_and_portable_digests_agree(monkeypatch, key, message):
    native = pytest.importorskip("siphashcore._native")

    monkeypatch.setattr(state_module, "_compress", state_module._portable_compress)
    portable_digest = siphash(key, message)
    monkeypatch.setattr(state_module, "_compress", native.compress)
    native_digest = siphash(key, message)

    assert native_digest == portable_digest
