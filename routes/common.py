from flask import current_app

DETECTOR_KEY = 'bump_detector'


def get_detector():
    """Sesi detektor milik aplikasi Flask ini"""
    return current_app.extensions[DETECTOR_KEY]
