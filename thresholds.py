# PARAMETER SINYAL ACCELEROMETER
GRAVITY = 9.81  # m/s² - magnitudo diam yang dikurangkan (aproksimasi)

# Filter high-pass satu kutub per sumbu (varian jerk)
HIGH_PASS_ALPHA = 0.8

# AUTO-TUNE BERDASARKAN KECEPATAN
# (batas_atas_kmh, cooldown_ms, sensitivity) - bracket terakhir tanpa batas atas
AUTO_TUNE_BRACKETS = [
    (5.0, 2500, 10.0),    # < 5 km/h - hampir diam, cooldown panjang
    (25.0, 1800, 12.0),   # 5 - 25 km/h
    (60.0, 1200, 14.0),   # 25 - 60 km/h
    (None, 800, 16.0),    # >= 60 km/h - cooldown pendek, threshold tinggi
]

# Rentang kontrol manual
MANUAL_TUNING = {
    'sensitivity_default': 12.0,
    'cooldown_default_ms': 2000,
    'sensitivity_min': 6.0,
    'sensitivity_max': 20.0,
    'cooldown_min_ms': 500,
    'cooldown_max_ms': 5000,
}

# VARIAN DETEKTOR
# baseline: |‖a‖ - g| dengan auto-tune
# enhanced: magnitudo jerk, geotag wajib, kecepatan minimum
DETECTOR_VARIANTS = {
    'baseline': {
        'conditioner': 'gravity',
        'auto_tune': True,
        'require_fix': False,
        'min_speed_kmh': None,
        'high_floor': 16.0,   # m/s²
        'high_margin': 3.0,
    },
    'enhanced': {
        'conditioner': 'jerk',
        'auto_tune': False,
        'manual_sensitivity': 3.0,   # m/s³
        'manual_cooldown_ms': 1500,
        'manual_limits': {'sensitivity_min': 1.0, 'sensitivity_max': 20.0},
        'require_fix': True,
        'min_speed_kmh': 7.2,        # 2 m/s
        'high_floor': 6.0,           # m/s³
        'high_margin': 3.0,
    },
}

# SKOR & KEPARAHAN BUMP
BUMP_SCORE = {
    'slope': 0.8,      # skor per unit kelebihan di atas threshold
    'offset': 1.0,
    'max': 5.0,
}

BUMP_SEVERITY_THRESHOLDS = {
    'light': 1.0,
    'moderate': 2.0,
    'heavy': 3.5,
}

# PARAMETER GPS
EARTH_RADIUS = 6371000  # Radius bumi untuk perhitungan jarak (meter)

MAX_PATH_POINTS = 10000  # Batas jumlah titik jalur (titik tertua dibuang)

# Jendela waktu valid untuk menurunkan kecepatan dari dua fix (detik, eksklusif)
SPEED_DERIVATION_WINDOW = (0.5, 15.0)

MAX_SPEED_KMH = 180.0  # Kecepatan di atas ini dianggap glitch GPS

# SEGMEN MERAH (HOT SEGMENT)
SEGMENT_BACKTRACK_M = 30.0     # Jarak mundur sepanjang jalur (meter)
SEGMENT_MAX_SCAN_POINTS = 500  # Batas titik yang dipindai saat mundur

# RELAY - jumlah maksimum bump pada snapshot awal dari server relay
RELAY_INIT_BUMPS = 5000
