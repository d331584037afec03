from __future__ import annotations

import logging
import signal
import threading

from gmic_runner.utils.cancellation import CancellationBridge, CancellationToken


def test_token_cancel_is_one_shot() -> None:
    token = CancellationToken()
    assert not token.is_cancelled()

    assert token.cancel() is True
    assert token.cancel() is False
    assert token.is_cancelled()


def test_token_wait_returns_when_cancelled_from_other_thread() -> None:
    token = CancellationToken()
    timer = threading.Timer(0.05, token.cancel)
    timer.start()
    try:
        assert token.wait(timeout=5) is True
    finally:
        timer.cancel()


def test_token_wait_times_out() -> None:
    assert CancellationToken().wait(timeout=0.01) is False


def test_interrupt_cancels_token_without_keyboard_interrupt() -> None:
    token = CancellationToken()

    with CancellationBridge(token):
        signal.raise_signal(signal.SIGINT)

    assert token.is_cancelled()


def test_second_interrupt_has_no_additional_effect(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="gmic_runner.utils.cancellation")
    token = CancellationToken()

    with CancellationBridge(token):
        signal.raise_signal(signal.SIGINT)
        signal.raise_signal(signal.SIGINT)

    assert token.is_cancelled()
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1


def test_original_handler_restored_on_exit() -> None:
    original = signal.getsignal(signal.SIGINT)
    token = CancellationToken()

    with CancellationBridge(token) as bridge:
        assert signal.getsignal(signal.SIGINT) == bridge._signal_handler

    assert signal.getsignal(signal.SIGINT) == original


def test_bridge_outside_main_thread_installs_nothing() -> None:
    original = signal.getsignal(signal.SIGINT)
    errors: list[BaseException] = []

    def target() -> None:
        try:
            with CancellationBridge(CancellationToken()):
                pass
        except BaseException as exc:  # noqa: BLE001
            errors.append(exc)

    thread = threading.Thread(target=target)
    thread.start()
    thread.join()

    assert errors == []
    assert signal.getsignal(signal.SIGINT) == original
