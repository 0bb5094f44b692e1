from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

import numpy as np
import pygame

from plate_push_rl.game import GameEvent


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tone:
    freq: float
    dur: float
    wave: str = "square"
    gain: float = 0.06
    delay: float = 0.0  # offset from the start of the cue


CUES: Dict[GameEvent, Tuple[Tone, ...]] = {
    GameEvent.MOVED: (Tone(520, 0.05, "square", 0.05),),
    GameEvent.PUSHED: (Tone(240, 0.06, "square", 0.06),),
    GameEvent.PLATE_ACTIVATED: (Tone(740, 0.08, "triangle", 0.05),),
    GameEvent.EXIT_OPENED: (Tone(880, 0.10, "triangle", 0.06),),
    GameEvent.WON: (
        Tone(660, 0.09, "square", 0.06),
        Tone(990, 0.10, "triangle", 0.06, delay=0.09),
    ),
    GameEvent.BLOCKED: (Tone(140, 0.06, "square", 0.05),),
}


def synthesize(tones: Iterable[Tone], sample_rate: int) -> np.ndarray:
    """Render ``tones`` to a mono float waveform in [-1, 1]."""
    tones = tuple(tones)
    total = max(t.delay + t.dur + 0.02 for t in tones)
    out = np.zeros(int(total * sample_rate), dtype=np.float32)
    for tone in tones:
        n = int(tone.dur * sample_rate)
        t = np.arange(n, dtype=np.float32) / sample_rate
        phase = np.sin(2.0 * np.pi * tone.freq * t)
        if tone.wave == "triangle":
            wave = (2.0 / np.pi) * np.arcsin(phase)
        else:
            wave = np.sign(phase)
        # Short attack then exponential decay
        attack = min(n, int(0.01 * sample_rate))
        env = np.geomspace(1.0, 1e-4 / tone.gain, num=n).astype(np.float32) * tone.gain
        if attack:
            env[:attack] = np.linspace(1e-4, tone.gain, num=attack, dtype=np.float32)
        start = int(tone.delay * sample_rate)
        out[start : start + n] += (wave * env)[: len(out) - start]
    return np.clip(out, -1.0, 1.0)


class AudioCues:
    """Plays a short tone per game event through pygame.mixer.

    Any mixer failure disables audio for the rest of the session.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._sounds: Dict[GameEvent, "pygame.mixer.Sound"] = {}
        self._ready = False

    def _ensure_ready(self) -> bool:
        if self._ready or not self.enabled:
            return self._ready
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=22050, size=-16, channels=1)
            freq, _, channels = pygame.mixer.get_init()
            for event, tones in CUES.items():
                samples = (synthesize(tones, freq) * 32767).astype(np.int16)
                if channels > 1:
                    samples = np.repeat(samples[:, None], channels, axis=1)
                self._sounds[event] = pygame.sndarray.make_sound(np.ascontiguousarray(samples))
            self._ready = True
        except (pygame.error, TypeError, ValueError) as exc:
            logger.warning("Audio disabled: %s", exc)
            self.enabled = False
        return self._ready

    def play(self, event: GameEvent) -> None:
        if not self._ensure_ready():
            return
        sound: Optional[pygame.mixer.Sound] = self._sounds.get(event)
        if sound is None:
            return
        try:
            sound.play()
        except pygame.error as exc:
            logger.warning("Audio disabled: %s", exc)
            self.enabled = False
            self._ready = False

    def play_events(self, events: Iterable[GameEvent]) -> None:
        for event in events:
            self.play(event)
