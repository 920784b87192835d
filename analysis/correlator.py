from thresholds import SEGMENT_BACKTRACK_M, SEGMENT_MAX_SCAN_POINTS
from analysis.geo import calculate_distance
from analysis.models import HighlightedSegment


class SegmentCorrelator:
    """Membangun segmen merah dengan berjalan mundur sepanjang jalur dari titik terbaru"""

    def __init__(self, backtrack_m=SEGMENT_BACKTRACK_M, max_scan_points=SEGMENT_MAX_SCAN_POINTS):
        self.backtrack_m = backtrack_m
        self.max_scan_points = max_scan_points

    def on_strong_event(self, coords, path, event_id=''):
        """
        coords: lokasi event (lat, lon)
        path: list titik (lat, lon), lama -> baru

        Return HighlightedSegment (lama -> baru, diakhiri lokasi event) atau None
        jika jalur kurang dari 2 titik.
        """
        if coords is None or len(path) < 2:
            return None

        segment = [path[-1]]
        accumulated = 0.0
        stop = max(0, len(path) - 1 - self.max_scan_points)

        for i in range(len(path) - 1, stop, -1):
            a_lat, a_lon = path[i]
            b_lat, b_lon = path[i - 1]
            accumulated += calculate_distance(a_lat, a_lon, b_lat, b_lon)
            segment.insert(0, path[i - 1])
            if accumulated >= self.backtrack_m:
                break

        # Titik terminal = lokasi event (tidak diduplikasi jika sama dengan titik terbaru)
        if tuple(coords) != tuple(path[-1]):
            accumulated += calculate_distance(path[-1][0], path[-1][1], coords[0], coords[1])
            segment.append(tuple(coords))

        return HighlightedSegment(
            event_id=event_id,
            points=tuple(segment),
            length_m=accumulated
        )
