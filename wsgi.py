"""WSGI entry point for gunicorn."""
from odd_one_out import create_app

app = create_app()

if __name__ == "__main__":
    from odd_one_out.extensions import socketio
    socketio.run(app, host="0.0.0.0", port=5000, debug=app.config.get("DEBUG", False))
