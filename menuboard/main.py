from contextlib import asynccontextmanager
import asyncio
import logging

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from menuboard.core.config import get_settings
from menuboard.core.errors import register_error_handlers
from menuboard.routers.auth import router as auth_router
from menuboard.routers.displays import router as displays_router
from menuboard.routers.health import router as health_router
from menuboard.routers.items import router as items_router
from menuboard.routers.menus import router as menus_router
from menuboard.routers.realtime import SocketHandlers
from menuboard.routers.restaurants import router as restaurants_router
from menuboard.services.broadcast import Broadcaster, create_socket_server
from menuboard.services.media import MediaStorage

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Created at import so StaticFiles can mount the directory
media_storage = MediaStorage()

sio = create_socket_server(settings.CORS_ORIGINS)
socket_handlers = SocketHandlers(sio)


@asynccontextmanager
async def lifespan(app: FastAPI):
    broadcaster = Broadcaster(sio, asyncio.get_running_loop())
    app.state.broadcaster = broadcaster
    app.state.media_storage = media_storage
    logger.info("Realtime broadcaster ready")
    try:
        yield
    finally:
        await broadcaster.close()


app = FastAPI(
    title=settings.APP_NAME,
    description="Digital menu board API - menus, items and paired displays with live updates.",
    version="0.1.0",
    lifespan=lifespan,
)

register_error_handlers(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Serve uploaded media
app.mount(
    media_storage.url_prefix,
    StaticFiles(directory=str(media_storage.upload_dir)),
    name="uploads",
)

# Include routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(menus_router)
app.include_router(items_router)
app.include_router(displays_router)
app.include_router(restaurants_router)


@app.get("/")
def read_root():
    return {
        "message": "Welcome to Menuboard API",
        "docs": "/docs",
        "health": "/health",
        "socket": "/socket.io"
    }


# Socket.IO answers under /socket.io/, everything else goes to FastAPI
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)
