"""
Speech Announcer Module
=======================

Text-to-speech output on a worker thread using pyttsx3.
"""

import logging
import queue
import threading
from typing import Optional

import pyttsx3

logger = logging.getLogger(__name__)


class SpeechAnnouncer:
    """
    Speaks announcements on a background thread.

    New text replaces anything still waiting in the queue, so the user
    always hears the most recent recognition.
    """

    def __init__(self, enabled: bool = True, language: str = "ar"):
        """
        Start the speech worker.

        Args:
            enabled: When False, speak() is a no-op and no engine is created
            language: Preferred voice language prefix
        """
        self.enabled = enabled
        self.language = language
        self.speech_queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._speaking = threading.Event()
        self._stop_speech = False
        self.speech_thread: Optional[threading.Thread] = None
        if enabled:
            self.speech_thread = threading.Thread(target=self._speech_worker, daemon=True)
            self.speech_thread.start()

    def speak(self, text: str) -> None:
        """Queue text for speech output, dropping pending announcements."""
        if not self.enabled or not text:
            return
        while True:
            try:
                self.speech_queue.get_nowait()
            except queue.Empty:
                break
        self.speech_queue.put(text)

    def is_speaking(self) -> bool:
        """True while an announcement is queued or playing."""
        return self._speaking.is_set() or not self.speech_queue.empty()

    def stop(self) -> None:
        """Stop the worker thread."""
        self._stop_speech = True
        if self.speech_thread:
            self.speech_queue.put(None)
            self.speech_thread.join(timeout=2.0)
            self.speech_thread = None

    def _select_voice(self, engine) -> None:
        for voice in engine.getProperty("voices") or []:
            languages = [
                lang.decode("utf-8", "ignore") if isinstance(lang, bytes) else str(lang)
                for lang in (getattr(voice, "languages", None) or [])
            ]
            if any(self.language in lang for lang in languages) or self.language in voice.id:
                engine.setProperty("voice", voice.id)
                return
        logger.warning("No '%s' voice available, using the default voice", self.language)

    def _speech_worker(self) -> None:
        """Worker thread for text-to-speech."""
        try:
            engine = pyttsx3.init()
            self._select_voice(engine)
        except (RuntimeError, OSError, ImportError) as e:
            logger.warning("Speech engine unavailable: %s", e)
            engine = None

        while not self._stop_speech:
            try:
                payload = self.speech_queue.get(timeout=0.5)
            except queue.Empty:
                continue
            if payload is None:
                break
            if engine is None:
                continue
            self._speaking.set()
            try:
                engine.say(payload)
                engine.runAndWait()
            except RuntimeError:
                logger.exception("Speech output failed")
            finally:
                self._speaking.clear()

        if engine:
            engine.stop()
