"""Starlette web adapter serving the board to display clients."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route, WebSocketRoute
from starlette.staticfiles import StaticFiles
from starlette.websockets import WebSocket, WebSocketDisconnect

from ptv_departures.adapters.web.formatters import format_departure, refresh_message

if TYPE_CHECKING:
    from starlette.requests import Request

    from ptv_departures.adapters.config.app_config import AppConfig
    from ptv_departures.adapters.web.broadcasters import ConnectionManager
    from ptv_departures.adapters.web.schedulers import BoardScheduler
    from ptv_departures.domain.models.board_state import BoardState

logger = logging.getLogger(__name__)

NOT_FOUND_BODY = {"message": "404 Not Found"}


def _not_found() -> JSONResponse:
    return JSONResponse(NOT_FOUND_BODY, status_code=404)


def create_app(
    board_state: BoardState,
    connections: ConnectionManager,
    scheduler: BoardScheduler | None = None,
    static_dir: str | None = None,
) -> Starlette:
    """Build the Starlette application.

    Args:
        board_state: Live board state the read endpoints snapshot.
        connections: Registry the WebSocket endpoint adds clients to.
        scheduler: Optional scheduler reported on by the status endpoint.
        static_dir: Optional directory with the display front end.
    """

    async def departures_window(request: Request) -> Response:
        """Return up to three upcoming departures of a platform."""
        window = board_state.window(request.path_params["plat"])
        if window is None:
            return _not_found()
        return JSONResponse([format_departure(d) for d in window])

    async def departure_after(request: Request) -> Response:
        """Return the departure following a given run."""
        departure = board_state.after(request.path_params["plat"], request.path_params["run"])
        if departure is None:
            return _not_found()
        return JSONResponse(format_departure(departure))

    async def departure_at(request: Request) -> Response:
        """Return the departure at a queue position."""
        try:
            index = int(request.path_params["idx"])
        except ValueError:
            return _not_found()
        departure = board_state.at(request.path_params["plat"], index)
        if departure is None:
            return _not_found()
        return JSONResponse(format_departure(departure))

    async def platform_socket(websocket: WebSocket) -> None:
        """Push channel for one platform's display."""
        platform = websocket.path_params["plat"]
        await websocket.accept()
        connections.register(websocket, platform)
        try:
            await websocket.send_json(refresh_message())
            # Clients never send anything meaningful; keep reading to notice disconnects
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            connections.unregister(websocket)

    async def healthz(_request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")

    async def status(_request: Request) -> Response:
        """Operational view of the board, clients and scheduled jobs."""
        body: dict[str, Any] = {
            "board": "ready" if board_state.is_ready else "cold",
            "version": board_state.version,
            "platforms": {
                platform: len(board_state.queue(platform) or [])
                for platform in board_state.platform_ids()
            },
            "clients": len(connections),
        }
        if scheduler is not None:
            body["scheduler"] = scheduler.get_job_info()
        return JSONResponse(body)

    routes: list[Any] = [
        Route("/departures/{plat}", departures_window, methods=["GET"]),
        Route("/departures/{plat}/after/{run}", departure_after, methods=["GET"]),
        Route("/departures/{plat}/{idx}", departure_at, methods=["GET"]),
        WebSocketRoute("/ws/{plat}", platform_socket),
        Route("/healthz", healthz, methods=["GET"]),
        Route("/status", status, methods=["GET"]),
    ]

    if static_dir:
        if Path(static_dir).is_dir():
            routes.append(Mount("/", app=StaticFiles(directory=static_dir, html=True)))
            logger.info(f"Serving display front end from {static_dir}")
        else:
            logger.warning(f"Static directory {static_dir} not found, front end not served")

    return Starlette(routes=routes)


class StarletteWebAdapter:
    """Runs the board's HTTP and WebSocket surface under uvicorn."""

    def __init__(
        self,
        board_state: BoardState,
        connections: ConnectionManager,
        scheduler: BoardScheduler,
        config: AppConfig,
    ) -> None:
        """Initialize the web adapter.

        Args:
            board_state: Live board state.
            connections: Registry of connected display clients.
            scheduler: Scheduler driving refreshes and ticks.
            config: Application configuration.
        """
        self.board_state = board_state
        self.connections = connections
        self.scheduler = scheduler
        self.config = config
        self._server: Any | None = None

    async def start(self) -> None:
        """Start the scheduler and serve until shutdown."""
        import uvicorn

        app = create_app(
            self.board_state,
            self.connections,
            scheduler=self.scheduler,
            static_dir=self.config.static_dir,
        )

        await self.scheduler.start()

        uvicorn_config = uvicorn.Config(
            app,
            host=self.config.host,
            port=self.config.port,
            log_level="info",
        )
        self._server = uvicorn.Server(uvicorn_config)
        logger.info(f"App listening on port {self.config.port}")
        await self._server.serve()

    async def stop(self) -> None:
        """Stop the scheduler and the web server."""
        await self.scheduler.stop()
        if self._server:
            self._server.should_exit = True
