import wave

import pytest

from ministering.client.recorder import VoiceRecorder


class FakeStream:
    def __init__(self, callback):
        self.callback = callback
        self.started = False
        self.closed = False

    def start(self):
        self.started = True

    def stop(self):
        self.started = False

    def close(self):
        self.closed = True

    def feed(self, data: bytes):
        self.callback(memoryview(data), len(data) // 2, None, None)


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def streams():
    return []


@pytest.fixture
def recorder(clock, streams):
    def factory(samplerate, channels, callback):
        stream = FakeStream(callback)
        streams.append(stream)
        return stream

    return VoiceRecorder(samplerate=16000, stream_factory=factory, clock=clock)


def test_record_and_write_wav(recorder, clock, streams, tmp_path):
    recorder.start()
    assert recorder.is_recording
    stream = streams[0]
    assert stream.started

    stream.feed(b"\x01\x00\x02\x00")
    clock.now += 1.5
    assert recorder.elapsed == pytest.approx(1.5)
    stream.feed(b"\x03\x00")
    clock.now += 0.5

    pcm = recorder.stop()

    assert pcm == b"\x01\x00\x02\x00\x03\x00"
    assert stream.closed
    assert not recorder.is_recording
    assert recorder.elapsed == pytest.approx(2.0)

    path = recorder.write_wav(str(tmp_path / "visit.wav"))
    with wave.open(path, "rb") as wf:
        assert wf.getnchannels() == 1
        assert wf.getsampwidth() == 2
        assert wf.getframerate() == 16000
        assert wf.readframes(wf.getnframes()) == pcm


def test_stream_closed_even_if_stop_fails(recorder, streams):
    recorder.start()
    stream = streams[0]

    def broken_stop():
        raise OSError("device unplugged")

    stream.stop = broken_stop

    with pytest.raises(OSError):
        recorder.stop()
    assert stream.closed
    assert not recorder.is_recording


def test_start_twice_rejected(recorder):
    recorder.start()

    with pytest.raises(RuntimeError):
        recorder.start()


def test_stop_without_start_rejected(recorder):
    with pytest.raises(RuntimeError):
        recorder.stop()


def test_new_recording_discards_previous_audio(recorder, streams):
    recorder.start()
    streams[0].feed(b"\x01\x00")
    recorder.stop()

    recorder.start()
    streams[1].feed(b"\x02\x00")

    assert recorder.stop() == b"\x02\x00"


def test_stream_closed_when_start_fails(clock):
    opened = []

    def factory(samplerate, channels, callback):
        stream = FakeStream(callback)

        def busy():
            raise OSError("device busy")

        stream.start = busy
        opened.append(stream)
        return stream

    recorder = VoiceRecorder(samplerate=16000, stream_factory=factory, clock=clock)

    with pytest.raises(OSError):
        recorder.start()
    assert opened[0].closed
    assert not recorder.is_recording
