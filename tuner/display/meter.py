"""
Render tuning results as a text meter
"""
import math
import sys
from typing import Optional, TextIO

from colorama import Fore, Style

from config.tuner_config import METER_WIDTH
from tuner.tuning.engine import TuningResult, TuningVerdict

CLEAR_SCREEN = '\033[2J\033[H'

MARKER = '●'
CENTER = '|'
FILL = '-'


def marker_index(cents: float, width: int = METER_WIDTH) -> int:
    """Meter cell for a deviation; +/-100 cents spans the half width, clamped to the meter"""
    center = width // 2
    raw = center + math.floor(cents / 100 * center)
    return max(0, min(width - 1, raw))


class MeterRenderer:
    """Build one display frame per tuning result"""

    def __init__(self, width=METER_WIDTH, color=True):
        """
        Args:
            width: Number of cells in the meter
            color: Wrap text in ANSI colours (colorama)
        """
        self.width = width
        self.color = color

    def _paint(self, text, *styles):
        if not self.color:
            return text
        return ''.join(styles) + text + Style.RESET_ALL

    def meter(self, cents: float) -> str:
        center = self.width // 2
        marker = marker_index(cents, self.width)

        cells = []
        for i in range(self.width):
            if i == marker:
                cells.append(MARKER)
            elif i == center:
                cells.append(CENTER)
            else:
                cells.append(FILL)
        return ''.join(cells)

    def scale_caption(self) -> str:
        # 'low' at the left edge, 'exact' over the center cell, 'high' flush right
        center = self.width // 2
        left = 'low'.ljust(center - 2)
        middle = 'exact'
        right = 'high'.rjust(self.width - len(left) - len(middle))
        return left + middle + right

    def verdict_line(self, result: TuningResult) -> str:
        verdict = result.verdict
        if verdict is TuningVerdict.IN_TUNE:
            return self._paint('✓ In tune!', Fore.GREEN, Style.BRIGHT)
        if verdict is TuningVerdict.FLAT:
            return self._paint(f"↑ {abs(result.cents):.1f} cents flat - tighten the string", Fore.RED)
        return self._paint(f"↓ {result.cents:.1f} cents sharp - loosen the string", Fore.RED)

    def render(self, result: Optional[TuningResult]) -> str:
        """
        Render a frame for the latest window

        Args:
            result: Tuning result, or None when no pitch was detected

        Returns:
            Multi-line frame text
        """
        if result is None:
            return self._paint('No pitch detected...', Fore.YELLOW)

        string = result.string
        sign = '+' if result.cents > 0 else ''

        output = []
        output.append(self._paint('=== Guitar Tuner ===', Fore.CYAN))
        output.append('')
        output.append(f"Detected frequency: {result.frequency:.2f} Hz")
        output.append(f"Closest string: {self._paint(string.name, Fore.MAGENTA)} "
                      f"({string.note} - {string.frequency:g} Hz)")
        output.append('')
        output.append(f"  {self.scale_caption()}")
        output.append(f"  {self.meter(result.cents)}")
        output.append(f"  Deviation: {sign}{result.cents:.1f} cents")
        output.append('')
        output.append(self.verdict_line(result))
        output.append('')
        output.append(self._paint('Press Ctrl+C to quit', Style.DIM))

        return '\n'.join(output)


class TerminalDisplay:
    """Display surface that always shows only the most recent frame"""

    def __init__(self, stream: Optional[TextIO] = None, clear=True):
        self.stream = stream or sys.stdout
        self.clear = clear
        self.frames_shown = 0
        self.last_frame = None

    def show(self, frame: str):
        if self.clear:
            self.stream.write(CLEAR_SCREEN)
        self.stream.write(frame + '\n')
        self.stream.flush()
        self.last_frame = frame
        self.frames_shown += 1
