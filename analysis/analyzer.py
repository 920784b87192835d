import numpy as np

from analysis.classifier import get_bump_severity
from analysis.geo import calculate_path_length


def analyze_speed_data(speeds_kmh):
    """Statistik kecepatan (km/h) dari daftar nilai, informasi saja, bukan klasifikasi"""
    speeds = [s for s in speeds_kmh if s is not None and s >= 0]

    if not speeds:
        return {
            'avg_speed': 0,
            'max_speed': 0,
            'min_speed': 0,
            'speed_range': "0 km/h",
            'count': 0,
            'has_speed_data': False
        }

    speed_array = np.array(speeds)
    avg_speed = float(np.mean(speed_array))
    max_speed = float(np.max(speed_array))
    min_speed = float(np.min(speed_array))

    # Format range kecepatan
    if min_speed == max_speed:
        speed_range = f"~{avg_speed:.1f} km/h"
    else:
        speed_range = f"{min_speed:.1f} - {max_speed:.1f} km/h"

    return {
        'avg_speed': avg_speed,
        'max_speed': max_speed,
        'min_speed': min_speed,
        'speed_range': speed_range,
        'count': len(speeds),
        'has_speed_data': True
    }


def analyze_bumps(events):
    """Statistik skor dan keparahan bump lokal"""
    severity_counts = {'light': 0, 'moderate': 0, 'heavy': 0}
    if not events:
        return {
            'count': 0,
            'max_score': 0,
            'avg_score': 0,
            'median_metric': 0,
            'severity_counts': severity_counts,
            'geotagged': 0
        }

    scores = np.array([e.score for e in events])
    metrics = np.array([e.accel_magnitude for e in events])

    for event in events:
        severity = get_bump_severity(event.score)
        if severity in severity_counts:
            severity_counts[severity] += 1

    return {
        'count': len(events),
        'max_score': float(np.max(scores)),
        'avg_score': float(np.mean(scores)),
        'median_metric': float(np.median(metrics)),
        'severity_counts': severity_counts,
        'geotagged': sum(1 for e in events if e.coords is not None)
    }


def build_session_summary(detector):
    """Ringkasan sesi untuk endpoint /summary dan laporan visual"""
    with detector.lock:
        events = list(detector.local_events)
        segments = list(detector.segments)
        path = detector.geo.get_path()
        observed_speeds = detector.geo.get_speed_history()
        feed_count = detector.feed.get_data_count()

    return {
        'variant': detector.variant,
        'device_id': detector.device_id,
        'bumps': analyze_bumps(events),
        'speed': analyze_speed_data(observed_speeds),
        'speed_at_bump': analyze_speed_data([e.speed_kmh for e in events]),
        'path': {
            'points': len(path),
            'length_m': calculate_path_length(path),
        },
        'segments': {
            'count': len(segments),
            'total_length_m': sum(s.length_m for s in segments),
        },
        'feed_count': feed_count,
        'remote_bumps': feed_count - len(events),
    }
