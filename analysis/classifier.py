import itertools

from thresholds import BUMP_SCORE, BUMP_SEVERITY_THRESHOLDS
from analysis.models import BumpEvent

ARMED = 'armed'
COOLING = 'cooling'


# === FUNGSI HELPER ===

def calculate_bump_score(metric, threshold):
    """Skor keparahan: naik monoton terhadap kelebihan metric di atas threshold, maksimal BUMP_SCORE['max']"""
    excess = max(0.0, metric - threshold)
    return min(BUMP_SCORE['max'], excess * BUMP_SCORE['slope'] + BUMP_SCORE['offset'])


def get_bump_severity(score):
    """Mendapatkan tingkat keparahan bump dari skor"""
    if score is None:
        return 'normal'
    if score >= BUMP_SEVERITY_THRESHOLDS['heavy']:
        return 'heavy'
    elif score >= BUMP_SEVERITY_THRESHOLDS['moderate']:
        return 'moderate'
    elif score >= BUMP_SEVERITY_THRESHOLDS['light']:
        return 'light'
    return 'normal'


def get_high_threshold(sensitivity, high_floor, high_margin):
    """Threshold 'kuat' untuk segmen merah, selalu >= threshold deteksi"""
    return max(high_floor, sensitivity + max(0.0, high_margin))


class BumpClassifier:
    """
    Gerbang threshold + cooldown dengan dua state: ARMED dan COOLING.

    ARMED -> COOLING  saat metric > sensitivity_threshold (event dibuat)
    COOLING -> ARMED  otomatis saat now - last_fire >= cooldown_ms
    Tidak ada event selama COOLING.
    """

    def __init__(self, device_id, require_fix=False, min_speed_kmh=None):
        self.device_id = device_id
        self.require_fix = require_fix
        self.min_speed_kmh = min_speed_kmh
        self._seq = itertools.count(1)
        self.reset()

    def reset(self):
        self.state = ARMED
        self.last_fire_ts = None

    def refresh_state(self, now, tuning):
        if self.state == COOLING and now - self.last_fire_ts >= tuning.cooldown_ms:
            self.state = ARMED
        return self.state

    def classify(self, conditioned, now, tuning, last_fix, speed_kmh=0.0):
        if self.refresh_state(now, tuning) == COOLING:
            return None

        metric = conditioned.metric
        if not metric > tuning.sensitivity_threshold:
            return None

        # Varian geotag: tanpa fix / terlalu lambat -> tidak fire, tetap ARMED
        if self.require_fix and last_fix is None:
            return None
        if self.min_speed_kmh is not None and speed_kmh < self.min_speed_kmh:
            return None

        self.state = COOLING
        self.last_fire_ts = now

        return BumpEvent(
            id=f"{int(now)}-{next(self._seq)}",
            device_id=self.device_id,
            timestamp=now,
            coords=last_fix.coords if last_fix is not None else None,
            accel_magnitude=metric,
            speed_kmh=speed_kmh,
            score=calculate_bump_score(metric, tuning.sensitivity_threshold),
        )
