import threading
from collections import deque

from thresholds import MAX_PATH_POINTS, RELAY_INIT_BUMPS


class PathBuffer:
    """
    Jalur yang ditempuh: titik (lat, lon) berurutan, tanpa duplikat berturut-turut,
    dibatasi max_points (titik tertua dibuang lebih dulu).
    """

    def __init__(self, max_points=MAX_PATH_POINTS):
        self.max_points = max_points
        self.points = deque(maxlen=max_points)
        self.lock = threading.Lock()

    def add_point(self, lat, lon):
        """Tambah titik jika berbeda dari titik terakhir. Return True jika ditambahkan."""
        point = (lat, lon)
        with self.lock:
            if self.points and self.points[-1] == point:
                return False
            # deque(maxlen) membuang titik tertua otomatis
            self.points.append(point)
            return True

    def get_points(self):
        with self.lock:
            return list(self.points)

    def get_count(self):
        with self.lock:
            return len(self.points)

    def clear(self):
        with self.lock:
            self.points.clear()


class BumpFeed:
    """
    Daftar bump untuk tampilan (terbaru di depan).
    Bump lokal disimpan dalam format payload, bump remote disimpan apa adanya.
    """

    def __init__(self):
        self.items = deque()
        self.lock = threading.Lock()

    def add_local(self, event):
        payload = event.to_payload()
        with self.lock:
            self.items.appendleft(payload)
        return payload

    def add_remote(self, payload):
        # Tanpa validasi, tanpa deduplikasi
        with self.lock:
            self.items.appendleft(payload)

    def add_remote_snapshot(self, payloads):
        """Snapshot awal dari relay (urutan lama -> baru), maksimal RELAY_INIT_BUMPS terakhir"""
        recent = list(payloads)[-RELAY_INIT_BUMPS:]
        with self.lock:
            for payload in recent:
                self.items.appendleft(payload)
        return len(recent)

    def get_data(self, limit=None):
        with self.lock:
            items = list(self.items)
        return items[:limit] if limit is not None else items

    def get_data_count(self):
        with self.lock:
            return len(self.items)

    def clear(self):
        with self.lock:
            self.items.clear()
