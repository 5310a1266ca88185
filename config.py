import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Seconds an empty session survives before the abandonment sweep deletes it
    SESSION_GRACE_PERIOD_SEC = float(os.environ.get('SESSION_GRACE_PERIOD_SEC', '60'))
    SOCKETIO_NAMESPACE = '/ws'
    CORS_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ALLOWED_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
        ).split(',')
        if origin.strip()
    ]
    PORT = int(os.environ.get('PORT', '3000'))
