#!/usr/bin/env python3
import argparse
import logging
import signal
import sys

import colorama

from config.tuner_config import SAMPLE_RATE, WINDOW_SIZE, LOG_FORMAT
from tuner.audio.pitch_estimator import ESTIMATORS, build_estimator
from tuner.audio.file_source import FileSource
from tuner.audio.microphone import MicrophoneSource, list_input_devices
from tuner.audio.window_assembler import SampleWindowAssembler
from tuner.display.meter import MeterRenderer, TerminalDisplay
from tuner.session import SessionController

logger = logging.getLogger('tuner')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Guitar Tuner - real-time tuning meter')
    parser.add_argument('-f', '--file', type=str, help='Replay an audio/video file instead of the microphone')
    parser.add_argument('-d', '--device', type=str, help='Input device index or name')
    parser.add_argument('--estimator', choices=sorted(ESTIMATORS), default='yin', help='Pitch estimator')
    parser.add_argument('--window-size', type=int, default=WINDOW_SIZE, help='Samples per analysis window')
    parser.add_argument('--realtime', action='store_true', help='Pace file replay at real speed')
    parser.add_argument('--no-color', action='store_true', help='Disable coloured output')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Log level (stderr)')
    parser.add_argument('--list-devices', action='store_true', help='List input devices and exit')
    return parser.parse_args(argv)


def parse_device(value):
    if value is None:
        return None
    return int(value) if value.isdigit() else value


def build_session(args) -> SessionController:
    if args.file:
        source = FileSource(args.file, sample_rate=SAMPLE_RATE, realtime=args.realtime)
    else:
        source = MicrophoneSource(sample_rate=SAMPLE_RATE, device=parse_device(args.device))

    return SessionController(
        source=source,
        estimator=build_estimator(args.estimator, SAMPLE_RATE),
        renderer=MeterRenderer(color=not args.no_color),
        display=TerminalDisplay(),
        assembler=SampleWindowAssembler(args.window_size),
    )


def run(args) -> int:
    if args.list_devices:
        for index, name, rate in list_input_devices():
            print(f"{index:3d}: {name} ({rate:.0f} Hz)")
        return 0

    session = build_session(args)

    def handle_signal(signum, frame):
        logger.info("Received signal %d, stopping", signum)
        session.stop()
        print("\nTuner stopped")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    print("Starting guitar tuner...\n")
    print("Play a single string\n")

    session.start()

    # Short timeout keeps the main thread responsive to signals
    while not session.wait(timeout=0.5):
        pass

    # Release a stream that was stopped from inside its own callback
    session.stop()

    if session.error is not None:
        print(f"Error: {session.error}", file=sys.stderr)
        return 1

    print("\nTuner stopped")
    return 0


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)
    if not args.no_color:
        colorama.just_fix_windows_console()

    try:
        status = run(args)
    except Exception:
        logger.exception("Unexpected error")
        status = 1

    sys.exit(status)


if __name__ == "__main__":
    main()
