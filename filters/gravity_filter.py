import math

from thresholds import GRAVITY
from analysis.models import ConditionedSignal
from filters.conditioner import SignalConditioner, is_finite_sample


def linear_magnitude(x, y, z, gravity=GRAVITY):
    """
    Aproksimasi percepatan linear: |‖(x, y, z)‖ - g|

    Bukan proyeksi vektor gravitasi, jadi error tergantung orientasi sumbu.
    """
    total = math.sqrt(x * x + y * y + z * z)
    return abs(total - gravity)


class GravityConditioner(SignalConditioner):
    """Varian baseline: tanpa state, metric = magnitudo linear"""

    name = 'gravity'

    def __init__(self, gravity=GRAVITY):
        self.gravity = gravity

    def on_sample(self, sample):
        if not is_finite_sample(sample):
            return ConditionedSignal(linear_magnitude=0.0)
        return ConditionedSignal(
            linear_magnitude=linear_magnitude(sample.x, sample.y, sample.z, self.gravity)
        )
