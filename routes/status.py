from flask import Blueprint, jsonify
from datetime import datetime

from thresholds import GRAVITY, SEGMENT_BACKTRACK_M, MAX_PATH_POINTS
from routes.common import get_detector


status_bp = Blueprint('status', __name__)


@status_bp.route('/status', methods=['GET'])
def status():
    """Endpoint untuk cek status sistem deteksi"""
    detector = get_detector()
    state = detector.get_status()

    # Status GPS
    gps_status = "active" if state['latest_fix'] is not None else "inactive"

    # Status sensor gerak
    motion_status = "inactive"
    if state['running'] and state['last_signal'] is not None:
        motion_status = "active (jerk)" if state['last_signal']['jerk'] is not None else "active (linear)"

    return jsonify({
        "system_status": "running" if state['running'] else "idle",
        "timestamp": datetime.now().isoformat(),
        "detector": state,
        "sensors": {
            "motion_sensor": motion_status,
            "gps": gps_status,
            "gps_errors": detector.geo.error_count,
        },
        "parameters": {
            "gravity": GRAVITY,
            "segment_backtrack_m": SEGMENT_BACKTRACK_M,
            "max_path_points": MAX_PATH_POINTS,
        }
    })
