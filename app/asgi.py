"""ASGI application with Socket.IO integration."""

import socketio

from app.main import create_app
from app.sockets.server import sio

fastapi_app = create_app()

# Socket.IO handles /socket.io/* (admin live updates), FastAPI the rest
app = socketio.ASGIApp(
    sio,
    other_asgi_app=fastapi_app,
    socketio_path="/socket.io",
)


if __name__ == "__main__":
    import uvicorn

    from app.core.config import settings

    uvicorn.run(
        "app.asgi:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )
