import logging
import sys

import librosa
import numpy as np

from confetti.constants import MIN_BURST_GAP

logger = logging.getLogger(__name__)


class AudioAnalyser:
    """
    Loads a soundtrack and finds the beats that confetti bursts are timed to.
    """

    def __init__(self, filepath):
        logger.info(f"[+] Loading audio: {filepath}...")
        try:
            # Load audio with original sampling rate
            self.y, self.sr = librosa.load(filepath, sr=None)
            self.duration = librosa.get_duration(y=self.y, sr=self.sr)
        except Exception as e:
            sys.exit(f"[!] Error loading audio file: {e}")

        logger.info("[+] Tracking beats...")
        self._calculate_beats()

    def _calculate_beats(self):
        tempo, beat_frames = librosa.beat.beat_track(y=self.y, sr=self.sr)
        self.tempo = float(np.atleast_1d(tempo)[0])
        self.beat_times = librosa.frames_to_time(beat_frames, sr=self.sr)
        logger.info(f"[i] Tempo {self.tempo:.1f} BPM, {len(self.beat_times)} beats")

    def get_burst_times(self, min_gap=MIN_BURST_GAP):
        """
        Beat times thinned so consecutive bursts are at least `min_gap` apart.
        """
        return thin_times(self.beat_times, min_gap)


def thin_times(times, min_gap):
    kept = []
    for t in times:
        if not kept or t - kept[-1] >= min_gap:
            kept.append(float(t))
    return kept
