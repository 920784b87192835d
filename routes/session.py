from flask import Blueprint, request, jsonify
from datetime import datetime

from routes.common import get_detector

session_bp = Blueprint('session', __name__)


@session_bp.route('/session/start', methods=['POST'])
def start_session():
    """
    Mulai deteksi.

    motion_permission: 'granted' / 'denied' / tidak ada (dianggap diizinkan)
    """
    data = request.get_json(silent=True) or {}
    permission = data.get('motion_permission')
    request_permission = (lambda: permission) if permission is not None else None

    detector = get_detector()
    started = detector.start(request_permission)

    if not started:
        return jsonify({
            "started": False,
            "error": "Motion permission denied",
            "timestamp": datetime.now().isoformat()
        }), 403

    return jsonify({
        "started": True,
        "detector_state": detector.classifier.state,
        "timestamp": datetime.now().isoformat()
    })


@session_bp.route('/session/stop', methods=['POST'])
def stop_session():
    detector = get_detector()
    detector.stop()
    return jsonify({
        "stopped": True,
        "timestamp": datetime.now().isoformat()
    })


@session_bp.route('/session/tuning', methods=['GET', 'POST'])
def tuning():
    """Lihat / ubah parameter deteksi (auto-tune atau manual)"""
    detector = get_detector()

    if request.method == 'POST':
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            return jsonify({"error": "No data received"}), 400

        if 'auto_tune' in data and not isinstance(data['auto_tune'], bool):
            return jsonify({"error": f"auto_tune must be true or false, got {data['auto_tune']!r}"}), 400

        try:
            if 'sensitivity' in data or 'cooldown_ms' in data:
                current = detector.tuner.manual
                detector.set_manual_tuning(
                    data.get('sensitivity', current.sensitivity_threshold),
                    data.get('cooldown_ms', current.cooldown_ms),
                )
            if 'auto_tune' in data:
                detector.set_auto_tune(data['auto_tune'])
        except (TypeError, ValueError) as e:
            return jsonify({"error": str(e)}), 400

    return jsonify(detector.get_status()['tuning'])
