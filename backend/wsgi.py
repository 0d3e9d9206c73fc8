try:
    from backend.adedonha.server import create_app
except ImportError:  # pragma: no cover
    from adedonha.server import create_app

app, socketio = create_app()
