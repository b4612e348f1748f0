import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    # Comma separated list, or '*' for any origin
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    # Round timers (seconds)
    ROUND_DURATION_SEC = int(os.environ.get('ROUND_DURATION_SEC', '60'))
    COOLDOWN_DURATION_SEC = int(os.environ.get('COOLDOWN_DURATION_SEC', '10'))
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1.0'))
    # The clock stays quiet under TESTING unless this is set
    ENABLE_CLOCK_IN_TESTS = False
