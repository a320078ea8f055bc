"""Realtime voice chat with the Gemini Live API.

The browser streams microphone audio as float32 frames; ``VoiceBridge`` turns
them into 16 kHz PCM for the live session, turns the 24 kHz PCM the model
speaks back into float32 playback buffers, and reports finished transcript
turns as they complete. It is transport agnostic: the caller hands in async
callables for reading microphone frames and for sending audio/events back.
"""
import asyncio
import logging
from dataclasses import dataclass

import numpy as np
from google.genai import types

logger = logging.getLogger(__name__)

INPUT_SAMPLE_RATE = 16000
OUTPUT_SAMPLE_RATE = 24000
INPUT_MIME = f"audio/pcm;rate={INPUT_SAMPLE_RATE}"


def encode_mic_frame(data):
    """float32 LE samples in [-1, 1] -> 16-bit PCM blob for the live session."""
    data = data[: len(data) - len(data) % 4]
    samples = np.frombuffer(data, dtype="<f4")
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    return types.Blob(data=pcm.tobytes(), mime_type=INPUT_MIME)


def decode_audio_frame(data):
    """16-bit PCM from the model -> float32 playback buffer in [-1, 1)."""
    data = data[: len(data) - len(data) % 2]
    return np.frombuffer(data, dtype="<i2").astype(np.float32) / 32768.0


def live_config(instruction, voice_name="Zephyr"):
    return types.LiveConnectConfig(
        response_modalities=[types.Modality.AUDIO],
        system_instruction=instruction,
        input_audio_transcription=types.AudioTranscriptionConfig(),
        output_audio_transcription=types.AudioTranscriptionConfig(),
        speech_config=types.SpeechConfig(
            voice_config=types.VoiceConfig(
                prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name)
            )
        ),
    )


@dataclass
class TranscriptEntry:
    role: str
    text: str


class TranscriptLog:
    """Collects transcription fragments until the model reports the turn complete."""

    def __init__(self):
        self.entries = []
        self._input = []
        self._output = []

    def add_input(self, text):
        if text:
            self._input.append(text)

    def add_output(self, text):
        if text:
            self._output.append(text)

    @property
    def pending(self):
        return "".join(self._input), "".join(self._output)

    def complete_turn(self):
        user, model = ("".join(parts).strip() for parts in (self._input, self._output))
        self._input.clear()
        self._output.clear()
        finished = []
        if user:
            finished.append(TranscriptEntry("user", user))
        if model:
            finished.append(TranscriptEntry("model", model))
        self.entries.extend(finished)
        return finished


class VoiceBridge:
    """One voice conversation.

    ``receive_frame()`` returns the next microphone frame, or None once the
    user stopped or went away. ``send_audio(buffer)`` and ``send_event(dict)``
    deliver playback buffers and UI events. ``release_microphone()`` runs once
    when the bridge ends, however it ends.
    """

    def __init__(self, client, model, config, receive_frame, send_audio, send_event, release_microphone=None):
        self.client = client
        self.model = model
        self.config = config
        self.receive_frame = receive_frame
        self.send_audio = send_audio
        self.send_event = send_event
        self.release_microphone = release_microphone
        self.transcript = TranscriptLog()

    async def run(self):
        try:
            async with self.client.aio.live.connect(model=self.model, config=self.config) as session:
                logger.info("Live session opened (%s)", self.model)
                await self._notify({"type": "open"})
                pump = asyncio.create_task(self._pump_microphone(session))
                relay = asyncio.create_task(self._relay_responses(session))
                done, pending = await asyncio.wait({pump, relay}, return_when=asyncio.FIRST_COMPLETED)
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                for task in done:
                    task.result()
        except Exception as e:
            logger.exception(f"Voice session failed: {e}")
            await self._notify({"type": "error", "message": "No se pudo mantener la conversación de voz."})
        finally:
            await self._release()
            logger.info("Live session closed")

    async def _pump_microphone(self, session):
        while True:
            frame = await self.receive_frame()
            if frame is None:
                return
            await session.send_realtime_input(audio=encode_mic_frame(frame))

    async def _relay_responses(self, session):
        while True:
            got_any = False
            async for message in session.receive():
                got_any = True
                await self._handle(message)
            if not got_any:
                return

    async def _handle(self, message):
        content = message.server_content
        if content is None:
            return
        if content.input_transcription and content.input_transcription.text:
            self.transcript.add_input(content.input_transcription.text)
        if content.output_transcription and content.output_transcription.text:
            self.transcript.add_output(content.output_transcription.text)
        if content.model_turn:
            for part in content.model_turn.parts or []:
                if part.inline_data and part.inline_data.data:
                    await self.send_audio(decode_audio_frame(part.inline_data.data))
        if content.interrupted:
            await self._notify({"type": "interrupted"})
        if content.turn_complete:
            for entry in self.transcript.complete_turn():
                await self._notify({"type": "transcript", "role": entry.role, "text": entry.text})

    async def _notify(self, event):
        try:
            await self.send_event(event)
        except Exception as e:
            logger.warning(f"Could not deliver {event.get('type')} event: {e}")

    async def _release(self):
        if self.release_microphone is None:
            return
        try:
            await self.release_microphone()
        except Exception as e:
            logger.warning(f"Releasing microphone failed: {e}")
