"""Process runtime: health web server, extension loading and bot lifecycle."""

from __future__ import annotations

import importlib
import logging
import math
import time
from typing import Any, Optional, Sequence

from aiohttp import web
from discord.ext import commands

from shared import health as healthmod
from modules.common.logs import log as human_log
from shared.config import (
    get_bot_name,
    get_bot_version,
    get_env_name,
    get_log_level,
    get_port,
)
from shared.logging import get_trace_id, set_trace_id, setup_logging

log = logging.getLogger("corgo.runtime")
command_log = logging.getLogger("corgo.commands")

EXTENSIONS: tuple[str, ...] = ("modules.general", "modules.cohorts")


def _identity() -> dict[str, Any]:
    return {"bot": get_bot_name(), "env": get_env_name(), "version": get_bot_version()}


def _json(payload: dict[str, Any], ok: bool) -> web.Response:
    return web.json_response(payload, status=200 if ok else 503)


def _request_tracer(access_logger: logging.Logger):
    """Middleware giving each request a trace id header and one access log line."""

    @web.middleware
    async def middleware(request: web.Request, handler) -> web.StreamResponse:
        trace = set_trace_id()
        started = time.perf_counter()
        response: Optional[web.StreamResponse] = None
        try:
            response = await handler(request)
            response.headers["X-Trace-Id"] = trace
            return response
        finally:
            access_logger.info(
                "http_request",
                extra={
                    "trace": trace,
                    "method": request.method,
                    "path": request.path,
                    "status": response.status if response is not None else 500,
                    "ms": int((time.perf_counter() - started) * 1000),
                },
            )

    return middleware


async def create_app(*, runtime: "Runtime | None" = None) -> web.Application:
    """Build the health app.

    ``/`` answers with identity, ``/ready`` needs every required component,
    ``/healthz`` only checks the gateway connection and ``/health`` combines
    both views.
    """

    labels = {"env": get_env_name(), "bot": get_bot_name()}
    access_logger = setup_logging(
        level=get_log_level(),
        static_fields=labels,
        access_static_fields=labels,
    )
    healthmod.set_component("runtime", True)

    def liveness() -> tuple[dict[str, Any], bool]:
        if runtime is None:
            return {"ok": True, **_identity()}, True
        return runtime.liveness()

    async def root(_: web.Request) -> web.Response:
        return _json({"ok": True, **_identity(), "trace": get_trace_id()}, True)

    async def ready(_: web.Request) -> web.Response:
        ok = healthmod.overall_ready()
        return _json({"ok": ok, "components": healthmod.components_snapshot()}, ok)

    async def health(_: web.Request) -> web.Response:
        payload, alive = liveness()
        components = healthmod.components_snapshot(include_required=False)
        ok = alive and all(item.get("ok", False) for item in components.values())
        payload = {
            **payload,
            "ok": ok,
            "components": components,
            "ready": healthmod.overall_ready(),
            "endpoint": "health",
        }
        return _json(payload, ok)

    async def healthz(_: web.Request) -> web.Response:
        payload, alive = liveness()
        return _json({**payload, "endpoint": "healthz"}, alive)

    app = web.Application(middlewares=[_request_tracer(access_logger)])
    for path, handler in (("/", root), ("/ready", ready), ("/health", health), ("/healthz", healthz)):
        app.router.add_get(path, handler)
    return app


def install_command_tracing(bot: commands.Bot) -> None:
    """Give every command invocation its own trace id and a completion log line.

    The trace id is bound from a global ``check_once``, which ``Bot.invoke``
    awaits in the invoking task before any command check. Log lines from
    checks such as ``moderator_only`` therefore carry the new id. Event
    listeners run in tasks of their own and cannot bind it for the checks.
    """

    async def start_trace(ctx: commands.Context) -> bool:
        set_trace_id()
        ctx._corgo_started = time.perf_counter()  # type: ignore[attr-defined]
        return True

    async def after_invoke(ctx: commands.Context) -> None:
        started = getattr(ctx, "_corgo_started", None)
        command_log.info(
            "command completed",
            extra={
                "command": getattr(ctx.command, "qualified_name", None),
                "guild_id": getattr(ctx.guild, "id", None),
                "user_id": getattr(ctx.author, "id", None),
                "failed": bool(getattr(ctx, "command_failed", False)),
                "ms": int((time.perf_counter() - started) * 1000) if started else None,
            },
        )

    bot.check_once(start_trace)
    bot.after_invoke(after_invoke)


class Runtime:
    """Owns the bot, its extensions and the health server for one process."""

    def __init__(self, bot: commands.Bot, *, extensions: Sequence[str] = EXTENSIONS) -> None:
        self.bot = bot
        self.extensions = tuple(extensions)
        self.web_app: Optional[web.Application] = None
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

    def latency_ms(self) -> Optional[float]:
        try:
            value = round(float(getattr(self.bot, "latency", None)) * 1000, 1)
        except (TypeError, ValueError):
            return None
        # NaN or inf until the first gateway heartbeat.
        return value if math.isfinite(value) else None

    def liveness(self) -> tuple[dict[str, Any], bool]:
        is_closed = getattr(self.bot, "is_closed", None)
        closed = bool(is_closed()) if callable(is_closed) else False
        payload = {
            "ok": not closed,
            **_identity(),
            "latency_ms": self.latency_ms(),
            "closed": closed,
        }
        return payload, not closed

    async def start_webserver(self, *, port: Optional[int] = None) -> None:
        if self._site is not None:
            return
        port = get_port() if port is None else port
        self.web_app = await create_app(runtime=self)
        self._runner = web.AppRunner(self.web_app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, host="0.0.0.0", port=port)
        await self._site.start()
        human_log.human("info", "web server listening", port=port)

    async def stop_webserver(self) -> None:
        site, runner = self._site, self._runner
        self._site = self._runner = None
        self.web_app = None
        if site is not None:
            await site.stop()
        if runner is not None:
            await runner.cleanup()

    async def load_extensions(self) -> None:
        for path in self.extensions:
            await importlib.import_module(path).setup(self.bot)
            log.info("extension loaded", extra={"feature_module": path})

    async def start(self, token: str) -> None:
        await self.start_webserver()
        install_command_tracing(self.bot)
        await self.load_extensions()
        await self.bot.start(token)

    async def close(self) -> None:
        await self.stop_webserver()
        if not self.bot.is_closed():
            await self.bot.close()
        healthmod.set_component("discord", False)
