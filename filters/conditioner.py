import math


class SignalConditioner:
    """
    Interface pengkondisi sinyal accelerometer.

    on_sample(sample) -> ConditionedSignal untuk setiap AccelSample.
    reset() membuang seluruh state (dipakai saat deteksi dihentikan).
    """

    name = 'base'

    def on_sample(self, sample):
        raise NotImplementedError

    def reset(self):
        pass


def make_conditioner(mode):
    """Pilih implementasi berdasarkan konfigurasi: 'gravity' atau 'jerk'"""
    from filters.gravity_filter import GravityConditioner
    from filters.jerk_filter import JerkConditioner

    conditioners = {
        GravityConditioner.name: GravityConditioner,
        JerkConditioner.name: JerkConditioner,
    }
    if mode not in conditioners:
        raise ValueError(f"Unknown conditioner '{mode}', expected one of {sorted(conditioners)}")
    return conditioners[mode]()


def is_finite_sample(sample):
    """False jika salah satu sumbu inf / NaN. Sampel seperti itu tidak boleh masuk ke state filter."""
    return all(math.isfinite(v) for v in (sample.x, sample.y, sample.z, sample.timestamp))
