import numpy as np

from thresholds import GRAVITY, HIGH_PASS_ALPHA
from analysis.models import ConditionedSignal
from filters.conditioner import SignalConditioner, is_finite_sample


class JerkConditioner(SignalConditioner):
    """
    Varian enhanced: high-pass satu kutub per sumbu lalu turunan waktu (jerk)

        hp = alpha * (hp + raw - prev_raw)
        jerk = ‖(hp - prev_hp) / dt‖

    State hanya sampel mentah terakhir, vektor hp terakhir dan timestamp terakhir.
    Sampel pertama setelah reset hanya mengisi state (jerk = 0), supaya
    offset gravitasi tidak muncul sebagai lonjakan.
    """

    name = 'jerk'

    def __init__(self, alpha=HIGH_PASS_ALPHA, gravity=GRAVITY):
        self.alpha = alpha
        self.gravity = gravity
        self.reset()

    def reset(self):
        self.prev_raw = None
        self.hp = np.zeros(3)
        self.prev_t = None

    def on_sample(self, sample):
        if not is_finite_sample(sample):
            # prev_raw / hp / prev_t tidak berubah
            return ConditionedSignal(linear_magnitude=0.0, jerk_magnitude=0.0)

        raw = np.array([sample.x, sample.y, sample.z], dtype=float)
        linear = abs(float(np.linalg.norm(raw)) - self.gravity)

        if self.prev_raw is None:
            self.prev_raw = raw
            self.prev_t = sample.timestamp
            return ConditionedSignal(linear_magnitude=linear, jerk_magnitude=0.0)

        prev_hp = self.hp
        self.hp = self.alpha * (prev_hp + raw - self.prev_raw)
        self.prev_raw = raw

        dt = (sample.timestamp - self.prev_t) / 1000.0
        self.prev_t = sample.timestamp

        # dt <= 0 (timestamp duplikat / mundur): tidak ada kontribusi jerk
        if dt > 0:
            jerk = float(np.linalg.norm((self.hp - prev_hp) / dt))
        else:
            jerk = 0.0

        return ConditionedSignal(linear_magnitude=linear, jerk_magnitude=jerk)
