"""Microphone capture for visit recordings."""

import logging
import threading
import time
import wave
from typing import Callable

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
CHANNELS = 1
SAMPLE_WIDTH = 2  # int16


def _default_stream_factory(samplerate: int, channels: int, callback):
    import sounddevice as sd

    return sd.RawInputStream(
        samplerate=samplerate,
        channels=channels,
        dtype="int16",
        callback=callback,
    )


class VoiceRecorder:
    """
    Start/stop microphone recorder with an elapsed-time counter.

    The input stream is opened on `start` and always released on `stop`.
    Captured audio is written out as 16-bit PCM WAV.
    """

    def __init__(
        self,
        samplerate: int = SAMPLE_RATE,
        channels: int = CHANNELS,
        stream_factory: Callable | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.samplerate = samplerate
        self.channels = channels
        self._stream_factory = stream_factory or _default_stream_factory
        self._clock = clock
        self._stream = None
        self._chunks: list[bytes] = []
        self._lock = threading.Lock()
        self._started_at: float | None = None
        self._duration = 0.0

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    @property
    def elapsed(self) -> float:
        """Seconds recorded so far, or the length of the last recording."""
        if self._started_at is not None:
            return self._clock() - self._started_at
        return self._duration

    def _on_audio(self, indata, frames, time_info, status) -> None:
        if status:
            logger.warning("Audio input status: %s", status)
        with self._lock:
            self._chunks.append(bytes(indata))

    def start(self) -> None:
        if self.is_recording:
            raise RuntimeError("Recording already in progress")
        self._chunks = []
        self._duration = 0.0
        stream = self._stream_factory(self.samplerate, self.channels, self._on_audio)
        try:
            stream.start()
        except Exception:
            stream.close()
            raise
        self._stream = stream
        self._started_at = self._clock()

    def stop(self) -> bytes:
        """Stop capture, release the device and return the raw PCM frames."""
        if not self.is_recording:
            raise RuntimeError("Not recording")
        stream, self._stream = self._stream, None
        try:
            stream.stop()
        finally:
            stream.close()
            self._duration = self._clock() - self._started_at
            self._started_at = None
        with self._lock:
            return b"".join(self._chunks)

    def write_wav(self, path: str) -> str:
        """Write the last recording to `path` as WAV."""
        with self._lock:
            frames = b"".join(self._chunks)
        wf = wave.open(path, "wb")
        try:
            wf.setnchannels(self.channels)
            wf.setsampwidth(SAMPLE_WIDTH)
            wf.setframerate(self.samplerate)
            wf.writeframes(frames)
        finally:
            wf.close()
        return path
