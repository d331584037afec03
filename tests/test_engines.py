from __future__ import annotations

import sys
import types

import numpy as np
import pytest
from PIL import Image

from gmic_runner.engine import DryRunEngine, GmicEngine, default_registry, get_engine
from gmic_runner.exceptions import (
    ArgumentError,
    EngineFault,
    OperationCancelledError,
    UnsupportedOperationError,
)
from gmic_runner.images import InputImage
from gmic_runner.utils.cancellation import CancellationToken


class FakeGmicException(Exception):
    pass


class FakeGmicImage:
    def __init__(self, array: np.ndarray) -> None:
        # (h, w, 1, c) float32, already in "yxzc" order.
        self.array = array

    @classmethod
    def from_PIL(cls, image: Image.Image) -> "FakeGmicImage":
        return cls(np.asarray(image, dtype=np.float32)[:, :, np.newaxis, :])

    def to_numpy_helper(self, interleave: bool = False, permute: str = "") -> np.ndarray:
        assert permute == "yxzc"
        return self.array


def _fake_gmic_module(run) -> types.ModuleType:  # type: ignore[no-untyped-def]
    module = types.ModuleType("gmic")
    module.GmicImage = FakeGmicImage  # type: ignore[attr-defined]
    module.GmicException = FakeGmicException  # type: ignore[attr-defined]
    module.run = run  # type: ignore[attr-defined]
    return module


def _input(name: str = "Image 1") -> InputImage:
    return InputImage(image=Image.new("RGB", (5, 4), (10, 20, 30)), name=name)


def test_registry_lists_builtin_engines() -> None:
    assert default_registry().list() == ["dryrun", "gmic"]
    assert isinstance(get_engine("dryrun"), DryRunEngine)
    assert isinstance(get_engine(), GmicEngine)


def test_registry_unknown_engine() -> None:
    with pytest.raises(ArgumentError, match="Unknown engine 'magick'"):
        get_engine("magick")


def test_dryrun_without_inputs_renders_placeholder() -> None:
    results = DryRunEngine().run("blur 3", [], CancellationToken())

    assert len(results) == 1
    assert results[0].name is None
    assert results[0].image.size == (512, 256)


def test_dryrun_echoes_inputs_with_names() -> None:
    source = _input("photo")

    results = DryRunEngine().run("blur 3", [source], CancellationToken())

    assert [r.name for r in results] == ["photo"]
    assert results[0].image is not source.image
    assert results[0].image.getpixel((0, 0)) == (10, 20, 30)


def test_dryrun_acknowledges_cancellation() -> None:
    token = CancellationToken()
    token.cancel()

    with pytest.raises(OperationCancelledError):
        DryRunEngine().run("blur 3", [_input()], token)


def test_gmic_engine_without_binding(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "gmic", None)

    with pytest.raises(UnsupportedOperationError, match="not installed"):
        GmicEngine().run("blur 3", [], CancellationToken())


def test_gmic_engine_returns_named_results(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    def run(command, images, names):  # type: ignore[no-untyped-def]
        calls.append(command)
        images.append(FakeGmicImage(np.full((2, 3, 1, 1), 255.0, dtype=np.float32)))
        names.append("")

    monkeypatch.setitem(sys.modules, "gmic", _fake_gmic_module(run))

    results = GmicEngine().run("blur 3", [_input()], CancellationToken())

    assert calls == ["blur 3"]
    assert [r.name for r in results] == ["Image 1", None]
    assert results[0].image.mode == "RGB"
    assert results[0].image.size == (5, 4)
    assert results[0].image.getpixel((0, 0)) == (10, 20, 30)
    assert results[1].image.mode == "L"
    assert results[1].image.size == (3, 2)


def test_gmic_engine_wraps_interpreter_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def run(command, images, names):  # type: ignore[no-untyped-def]
        raise FakeGmicException("Unknown command 'blurr'")

    monkeypatch.setitem(sys.modules, "gmic", _fake_gmic_module(run))

    with pytest.raises(EngineFault) as excinfo:
        GmicEngine().run("blurr 3", [], CancellationToken())

    assert str(excinfo.value.__cause__) == "Unknown command 'blurr'"


def test_gmic_engine_checks_token_before_running(monkeypatch: pytest.MonkeyPatch) -> None:
    def run(command, images, names):  # type: ignore[no-untyped-def]
        raise AssertionError("interpreter must not start")

    monkeypatch.setitem(sys.modules, "gmic", _fake_gmic_module(run))
    token = CancellationToken()
    token.cancel()

    with pytest.raises(OperationCancelledError):
        GmicEngine().run("blur 3", [], token)


def test_gmic_engine_discards_results_cancelled_mid_run(monkeypatch: pytest.MonkeyPatch) -> None:
    token = CancellationToken()

    def run(command, images, names):  # type: ignore[no-untyped-def]
        token.cancel()

    monkeypatch.setitem(sys.modules, "gmic", _fake_gmic_module(run))

    with pytest.raises(OperationCancelledError):
        GmicEngine().run("blur 3", [_input()], token)
