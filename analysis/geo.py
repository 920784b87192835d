import math

from thresholds import EARTH_RADIUS


def calculate_distance(lat1, lon1, lat2, lon2):
    """Menghitung jarak antara dua koordinat GPS dalam meter"""
    if any(coord is None for coord in [lat1, lon1, lat2, lon2]):
        return 0

    # Convert to radians
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    # Haversine formula
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat/2)**2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon/2)**2
    c = 2 * math.asin(math.sqrt(a))

    return EARTH_RADIUS * c


def calculate_path_length(points):
    """Panjang total jalur (list of (lat, lon)) dalam meter"""
    if len(points) < 2:
        return 0

    total_distance = 0
    for i in range(1, len(points)):
        total_distance += calculate_distance(
            points[i-1][0], points[i-1][1],
            points[i][0], points[i][1]
        )

    return total_distance
