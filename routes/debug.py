from flask import Blueprint, jsonify
from datetime import datetime

from analysis.models import AccelSample
from core.thingsboard import test_thingsboard_conn
from filters.conditioner import make_conditioner
from thresholds import GRAVITY

debug_bp = Blueprint('debug', __name__)


@debug_bp.route('/debug/thingsboard/test', methods=['POST'])
def debug_thingsboard_test():
    """Kirim payload test ke ThingsBoard"""
    success = test_thingsboard_conn()
    return jsonify({
        "success": success,
        "timestamp": datetime.now().isoformat()
    })


@debug_bp.route('/debug/filters/test', methods=['GET'])
def debug_filters_test():
    """Debug endpoint untuk membandingkan conditioner gravity vs jerk pada data sintetis"""
    # Diam di z = g, lalu satu hentakan, lalu diam lagi (50 Hz)
    test_z = [
        GRAVITY, GRAVITY, GRAVITY, GRAVITY,   # Diam
        GRAVITY + 14.0, GRAVITY - 8.0,        # Hentakan jalan rusak
        GRAVITY, GRAVITY, GRAVITY,            # Diam lagi
    ]
    samples = [AccelSample(x=0.0, y=0.0, z=z, timestamp=i * 20.0) for i, z in enumerate(test_z)]

    results = {}
    for mode in ['gravity', 'jerk']:
        conditioner = make_conditioner(mode)
        signals = [conditioner.on_sample(s) for s in samples]
        results[mode] = {
            "metric": [round(s.metric, 3) for s in signals],
            "max_metric": round(max(s.metric for s in signals), 3),
        }

    return jsonify({
        "test_input_z": test_z,
        "sample_interval_ms": 20,
        "results": results,
        "timestamp": datetime.now().isoformat()
    })
