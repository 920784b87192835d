from flask import Blueprint, request, jsonify, send_file
from datetime import datetime
import os

from analysis.analyzer import build_session_summary
from analysis.visualizer import create_session_visualization
from routes.common import get_detector

analysis_bp = Blueprint('analysis', __name__)


@analysis_bp.route('/bumps', methods=['GET'])
def get_bumps():
    """Feed bump (terbaru di depan): lokal dan remote"""
    limit = request.args.get('limit', None, type=int)
    detector = get_detector()
    bumps = detector.feed.get_data(limit)

    return jsonify({
        "total": detector.feed.get_data_count(),
        "count": len(bumps),
        "bumps": bumps
    })


@analysis_bp.route('/bumps/remote', methods=['POST'])
def receive_remote_bumps():
    """Bump dari perangkat lain: objek tunggal, atau list sebagai snapshot awal relay"""
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "No data received"}), 400

    detector = get_detector()
    if isinstance(data, list):
        accepted = detector.on_remote_snapshot(data)
    else:
        detector.on_remote_bump(data)
        accepted = 1

    return jsonify({
        "status": "success",
        "accepted": accepted,
        "timestamp": datetime.now().isoformat()
    })


@analysis_bp.route('/path', methods=['GET'])
def get_path():
    detector = get_detector()
    path = detector.geo.get_path()
    return jsonify({
        "count": len(path),
        "points": [list(p) for p in path]
    })


@analysis_bp.route('/segments', methods=['GET'])
def get_segments():
    detector = get_detector()
    with detector.lock:
        segments = [s.to_payload() for s in detector.segments]
    return jsonify({
        "count": len(segments),
        "segments": segments
    })


@analysis_bp.route('/summary', methods=['GET'])
def get_summary():
    """Ringkasan sesi deteksi"""
    summary = build_session_summary(get_detector())
    summary['timestamp'] = datetime.now().isoformat()
    summary['units'] = {
        "accel": "m/s² (baseline) / m/s³ (enhanced jerk)",
        "speed": "km/h",
        "length": "meters"
    }
    return jsonify(summary)


@analysis_bp.route('/report', methods=['GET'])
def get_report():
    """Laporan visual sesi dalam PNG"""
    try:
        filepath, filename = create_session_visualization(get_detector())
    except Exception as e:
        print(f"❌ Error membuat visualisasi: {e}")
        return jsonify({"error": str(e)}), 500

    print(f"📸 Laporan sesi dibuat: {filename}")
    return send_file(os.path.abspath(filepath), mimetype='image/png', download_name=filename)
