import logging
import queue
import time

from moodvis.audio_analyser import AudioFrame, SpectrumAnalyser
from moodvis.constants import DEFAULT_SAMPLE_RATE, FFT_SIZE, SMOOTHING_TIME_CONSTANT

logger = logging.getLogger(__name__)

MAX_QUEUED_BLOCKS = 32


class CaptureError(Exception):
    """Raised when the microphone cannot be opened. The message is user-facing."""


def describe_capture_error(exc):
    """Turn a PortAudio error into a message suitable for the user."""
    text = str(exc).lower()
    if "permission" in text or "denied" in text:
        return "Microphone access was denied, allow it in your system settings"
    if (
        "no default input device" in text
        or "invalid device" in text
        or "error querying device" in text
    ):
        return "No usable microphone was found"
    if "unavailable" in text or "busy" in text:
        return "The microphone is in use by another application"
    return f"Error accessing the microphone: {exc}"


def open_input_stream(**kwargs):
    """Open and start a sounddevice input stream."""
    # PortAudio is loaded on import, so a missing system library surfaces here
    try:
        import sounddevice as sd
    except OSError as e:
        raise CaptureError(f"Audio backend unavailable: {e}") from e

    try:
        stream = sd.InputStream(**kwargs)
        stream.start()
    except sd.PortAudioError as e:
        raise CaptureError(describe_capture_error(e)) from e
    return stream


class MicrophoneCapture:
    """
    Live microphone input feeding a SpectrumAnalyser.

    The audio callback only queues blocks; `read()` drains the queue from the
    tick loop, so analyser state is never touched from the audio thread.
    """

    def __init__(
        self,
        sample_rate=DEFAULT_SAMPLE_RATE,
        fft_size=FFT_SIZE,
        smoothing_time_constant=SMOOTHING_TIME_CONSTANT,
        device=None,
        stream_factory=open_input_stream,
    ):
        self.sample_rate = sample_rate
        self.device = device
        self.analyser = SpectrumAnalyser(fft_size, smoothing_time_constant)
        self._stream_factory = stream_factory
        self._queue = queue.Queue(maxsize=MAX_QUEUED_BLOCKS)
        self._stream = None
        self._started_at = 0.0

    @property
    def active(self):
        return self._stream is not None

    def _callback(self, indata, frames, time_info, status):
        if status:
            logger.warning(f"[!] Audio warning: {status}")
        try:
            self._queue.put_nowait(indata[:, 0].copy())
        except queue.Full:
            logger.debug("Dropping audio block, tick loop is behind")

    def start(self):
        if self.active:
            return
        try:
            self._stream = self._stream_factory(
                device=self.device,
                channels=1,
                samplerate=self.sample_rate,
                dtype="float32",
                callback=self._callback,
            )
        except CaptureError as e:
            logger.error(f"[!] {e}")
            raise
        self._started_at = time.monotonic()
        logger.info(f"[+] Microphone capture started @ {self.sample_rate} Hz")

    def read(self):
        """Drain queued audio into the analyser and return the current frame."""
        while True:
            try:
                block = self._queue.get_nowait()
            except queue.Empty:
                break
            self.analyser.write(block)

        return AudioFrame(
            time=time.monotonic() - self._started_at,
            freq_db=self.analyser.get_float_frequency_data(),
            time_samples=self.analyser.get_float_time_domain_data(),
            sample_rate=self.sample_rate,
        )

    def stop(self):
        if not self.active:
            return
        self._stream.stop()
        self._stream.close()
        self._stream = None

        while not self._queue.empty():
            self._queue.get_nowait()
        self.analyser.reset()
        logger.info("[+] Microphone capture stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
