import math
from collections import deque

from thresholds import MAX_PATH_POINTS, SPEED_DERIVATION_WINDOW, MAX_SPEED_KMH
from analysis.buffer import PathBuffer
from analysis.geo import calculate_distance
from analysis.models import FixUpdate


def clamp_speed_kmh(speed_mps):
    """Konversi m/s -> km/h dan batasi ke [0, MAX_SPEED_KMH] untuk menolak glitch GPS"""
    return max(0.0, min(MAX_SPEED_KMH, speed_mps * 3.6))


def derive_speed_mps(prev_fix, fix):
    """
    Turunkan kecepatan dari dua fix berurutan (haversine / selisih waktu).
    Return None jika selisih waktu di luar SPEED_DERIVATION_WINDOW.
    """
    dt = (fix.timestamp - prev_fix.timestamp) / 1000.0
    min_dt, max_dt = SPEED_DERIVATION_WINDOW
    if not (min_dt < dt < max_dt):
        return None

    distance = calculate_distance(
        prev_fix.latitude, prev_fix.longitude,
        fix.latitude, fix.longitude
    )
    return distance / dt


class GeoTracker:
    """Menyimpan fix terakhir, kecepatan saat ini (km/h), dan riwayat jalur."""

    def __init__(self, max_points=MAX_PATH_POINTS):
        self.path = PathBuffer(max_points)
        self.latest_fix = None
        self.speed_kmh = 0.0
        # Kecepatan yang teramati (untuk ringkasan sesi), sama panjang maksimum dengan jalur
        self.speed_history = deque(maxlen=max_points)
        self.fix_count = 0
        self.error_count = 0

    def on_fix(self, fix):
        """Return FixUpdate, atau None jika koordinat tidak valid (inf / NaN). Fix seperti itu dibuang."""
        if not (math.isfinite(fix.latitude) and math.isfinite(fix.longitude)):
            self.error_count += 1
            print(f"📍 Invalid fix dibuang: ({fix.latitude}, {fix.longitude})")
            return None

        speed_mps = None
        if fix.speed_mps is not None and math.isfinite(fix.speed_mps) and fix.speed_mps >= 0:
            speed_mps = fix.speed_mps
        elif self.latest_fix is not None:
            speed_mps = derive_speed_mps(self.latest_fix, fix)

        speed_updated = False
        if speed_mps is not None and math.isfinite(speed_mps):
            self.speed_kmh = clamp_speed_kmh(speed_mps)
            self.speed_history.append(self.speed_kmh)
            speed_updated = True

        path_appended = self.path.add_point(fix.latitude, fix.longitude)

        self.latest_fix = fix
        self.fix_count += 1

        return FixUpdate(
            speed_kmh=self.speed_kmh,
            speed_updated=speed_updated,
            path_appended=path_appended
        )

    def on_location_error(self, error):
        """Error dari sumber lokasi: dicatat saja, state tidak berubah"""
        self.error_count += 1
        print(f"📍 GPS error (tracking continues): {error}")

    def get_path(self):
        return self.path.get_points()

    def get_speed_history(self):
        return list(self.speed_history)

    def reset(self):
        self.path.clear()
        self.latest_fix = None
        self.speed_kmh = 0.0
        self.speed_history.clear()
        self.fix_count = 0
        self.error_count = 0
