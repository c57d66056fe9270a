import signal
import threading

import pytest

from tuner.session import SessionState


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    saved = {signum: signal.getsignal(signum) for signum in (signal.SIGINT, signal.SIGTERM)}
    yield
    for signum, handler in saved.items():
        signal.signal(signum, handler)


@pytest.fixture
def sessions(main_module, monkeypatch):
    """Record every session main builds"""
    built = []
    build_session = main_module.build_session

    def recording_build_session(args):
        session = build_session(args)
        built.append(session)
        return session

    monkeypatch.setattr(main_module, 'build_session', recording_build_session)
    return built


def test_file_replay_exits_cleanly(main_module, sessions, write_tone, capsys):
    path = write_tone(seconds=0.5, frequency=110.0)

    with pytest.raises(SystemExit) as exc:
        main_module.main(['--file', str(path), '--no-color'])

    assert exc.value.code == 0
    assert sessions[0].state is SessionState.STOPPED
    assert sessions[0].stats.windows == 5
    assert '5th string' in capsys.readouterr().out


def test_stream_error_exits_with_failure(main_module, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main_module.main(['--file', str(tmp_path / 'missing.wav'), '--no-color'])

    assert exc.value.code == 1
    assert 'Error:' in capsys.readouterr().err


def test_unexpected_failure_exits_with_failure(main_module, monkeypatch):
    def broken(args):
        raise RuntimeError('boom')

    monkeypatch.setattr(main_module, 'build_session', broken)

    with pytest.raises(SystemExit) as exc:
        main_module.main(['--no-color'])

    assert exc.value.code == 1


@pytest.mark.parametrize('signum', [signal.SIGINT, signal.SIGTERM])
def test_termination_signal_stops_and_exits_cleanly(main_module, sessions, write_tone, signum):
    path = write_tone(seconds=3.0)

    # Delivered to the main thread while main() waits on the realtime replay
    timer = threading.Timer(0.3, signal.raise_signal, args=(signum,))
    timer.start()
    try:
        with pytest.raises(SystemExit) as exc:
            main_module.main(['--file', str(path), '--realtime', '--no-color'])
    finally:
        timer.cancel()

    assert exc.value.code == 0
    assert sessions[0].state is SessionState.STOPPED
    assert not sessions[0].source.is_open
    assert sessions[0].error is None


def test_installed_interrupt_handler_stops_the_session(main_module, monkeypatch, write_tone):
    path = write_tone(seconds=3.0)
    built = []
    build_session = main_module.build_session

    def build_and_interrupt(args):
        session = build_session(args)
        start = session.start

        def start_then_interrupt():
            start()
            signal.getsignal(signal.SIGINT)(signal.SIGINT, None)

        session.start = start_then_interrupt
        built.append(session)
        return session

    monkeypatch.setattr(main_module, 'build_session', build_and_interrupt)

    with pytest.raises(SystemExit) as exc:
        main_module.main(['--file', str(path), '--realtime', '--no-color'])

    assert exc.value.code == 0
    assert built[0].state is SessionState.STOPPED
    assert not built[0].source.is_open
