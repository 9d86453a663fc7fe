# notification_doctor/diagnostics/console.py
import sys
from typing import Iterable, Optional, TextIO

BANNER_WIDTH = 56


class Console:
    """
    Transcript de la corrida. Todo sale por print, también lo que
    llega desde el hilo del listener.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def line(self, text: str = "") -> None:
        print(text, file=self.stream or sys.stdout, flush=True)

    def banner(self, title: str) -> None:
        self.line()
        self.line("╔" + "═" * BANNER_WIDTH + "╗")
        self.line("║" + title.center(BANNER_WIDTH) + "║")
        self.line("╚" + "═" * BANNER_WIDTH + "╝")

    def header(self, title: str) -> None:
        self.line(f"\n========== {title} ==========")

    def passed(self, text: str) -> None:
        self.line(f"✅ PASS: {text}")

    def failed(self, text: str) -> None:
        self.line(f"❗ FAIL: {text}")

    def warn(self, text: str) -> None:
        self.line(f"⚠️  WARNING: {text}")

    def info(self, text: str, label: str = "INFO") -> None:
        self.line(f"ℹ️  {label}: {text}")

    def progress(self, text: str) -> None:
        self.line(f"⏳ {text}")

    def detail(self, text: str) -> None:
        self.line(f"   {text}")

    def hint(self, text: str) -> None:
        self.line(f"   → {text}")

    def fix(self, title: str, lines: Iterable[str]) -> None:
        self.line(f"\n   📝 FIX: {title}")
        for text in lines:
            self.detail(text)
