from thresholds import AUTO_TUNE_BRACKETS, MANUAL_TUNING
from analysis.models import TuningParams


def get_auto_params(speed_kmh):
    """Parameter cooldown & sensitivity berdasarkan bracket kecepatan"""
    for upper_kmh, cooldown_ms, sensitivity in AUTO_TUNE_BRACKETS:
        if upper_kmh is None or speed_kmh < upper_kmh:
            return TuningParams(cooldown_ms=cooldown_ms, sensitivity_threshold=sensitivity, source='auto')
    # AUTO_TUNE_BRACKETS selalu diakhiri bracket tanpa batas atas
    raise ValueError(f"No tuning bracket for speed {speed_kmh}")


def validate_manual_params(sensitivity, cooldown_ms, limits=None):
    limits = limits or MANUAL_TUNING
    if sensitivity is None or cooldown_ms is None:
        raise ValueError("sensitivity and cooldown_ms are both required")

    sensitivity = float(sensitivity)
    cooldown_ms = float(cooldown_ms)

    if sensitivity <= 0 or cooldown_ms <= 0:
        raise ValueError("sensitivity and cooldown_ms must be positive")
    if not (limits['sensitivity_min'] <= sensitivity <= limits['sensitivity_max']):
        raise ValueError(
            f"sensitivity {sensitivity} outside [{limits['sensitivity_min']}, {limits['sensitivity_max']}]"
        )
    if not (limits['cooldown_min_ms'] <= cooldown_ms <= limits['cooldown_max_ms']):
        raise ValueError(
            f"cooldown_ms {cooldown_ms} outside [{limits['cooldown_min_ms']}, {limits['cooldown_max_ms']}]"
        )
    return sensitivity, cooldown_ms


class AutoTuner:
    """
    Sumber TuningParams untuk classifier.

    Mode auto: dihitung ulang tiap update kecepatan.
    Mode manual: nilai eksplisit dari pengguna. Kedua parameter selalu dari sumber yang sama.
    """

    def __init__(self, auto_tune=True, manual_sensitivity=None, manual_cooldown_ms=None, limits=None):
        self.limits = dict(MANUAL_TUNING)
        self.limits.update(limits or {})
        if manual_sensitivity is None:
            manual_sensitivity = MANUAL_TUNING['sensitivity_default']
        if manual_cooldown_ms is None:
            manual_cooldown_ms = MANUAL_TUNING['cooldown_default_ms']

        self.auto_tune = auto_tune
        self.speed_kmh = 0.0
        self.auto = get_auto_params(0.0)
        self.manual = None
        self.set_manual(manual_sensitivity, manual_cooldown_ms)

    def update_speed(self, speed_kmh):
        self.speed_kmh = speed_kmh
        if self.auto_tune:
            self.auto = get_auto_params(speed_kmh)
        return self.params

    def set_auto(self, enabled):
        if not isinstance(enabled, bool):
            raise ValueError(f"auto_tune must be a bool, got {enabled!r}")
        self.auto_tune = enabled
        if self.auto_tune:
            self.auto = get_auto_params(self.speed_kmh)
        print(f"🎛️ Auto-tune {'ON' if self.auto_tune else 'OFF'} → {self.params}")

    def set_manual(self, sensitivity, cooldown_ms):
        sensitivity, cooldown_ms = validate_manual_params(sensitivity, cooldown_ms, self.limits)
        self.manual = TuningParams(cooldown_ms=cooldown_ms, sensitivity_threshold=sensitivity, source='manual')
        return self.manual

    @property
    def params(self):
        return self.auto if self.auto_tune else self.manual
