"""
Incident Tracker - Root Entry Point.

Application code lives in src/incident_tracker.

For development: python main.py
For production: point uvicorn or gunicorn at ``main:app``
"""

from incident_tracker.main import get_application, run_development_server

# App instance for ASGI servers
app = get_application()

if __name__ == "__main__":
    run_development_server()
