"""TunnelService — expose a service through a cloudflared quick tunnel.

State machine per exposure attempt::

    starting --(internal URL + session name)--> polling
    polling  --(URL found in container logs)--> ready   (container kept running)
    polling  --(timeout / container gone)-----> failed  (container stopped)

The polling phase owns the spawned container: every exit path stops it
except the explicit hand-off at ``ready``, where stopping would close
the tunnel.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

from harborctl.domain.tunnel import (
    TunnelSession,
    TunnelState,
    extract_tunnel_url,
    session_filter,
    session_name,
)
from harborctl.errors import EndpointUnavailable, HarborError, SpawnError, TunnelTimeout
from harborctl.services.base import BaseService
from harborctl.services.compose import ComposeService
from harborctl.services.endpoints import EndpointService
from harborctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from harborctl.config.settings import HarborSettings
    from harborctl.infrastructure.engine import DockerEngine
    from harborctl.infrastructure.store import EnvStore

log = structlog.get_logger(__name__)

DEFAULT_TUNNELS_KEY = "services.tunnels"


class TunnelService(BaseService):
    """Starts, watches, and tears down tunnel containers."""

    def __init__(
        self,
        store: EnvStore,
        settings: HarborSettings,
        *,
        engine: DockerEngine | None = None,
        compose: ComposeService | None = None,
        endpoints: EndpointService | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(store, settings, engine=engine)
        self._compose = compose or ComposeService(store, settings, engine=self._engine)
        self._endpoints = endpoints or EndpointService(store, settings, engine=self._engine)
        self._sleep = sleep
        self._clock = clock

    # ------------------------------------------------------------------
    # expose
    # ------------------------------------------------------------------

    def expose(self, handle: str) -> ServiceResult:
        """Open a tunnel to *handle* and wait for its public URL."""
        cfg = self._settings.tunnel
        session = TunnelSession(target_service=handle)

        try:
            session.internal_url = self._endpoints.internal_url(handle)
        except HarborError as exc:
            session.fail(exc.message)
            return ServiceResult.from_exception("tunnel", exc)
        session.name = session_name(cfg.name_prefix, self.container_prefix, handle)
        log.info("starting tunnel", service=handle, name=session.name, internal_url=session.internal_url)

        session.advance(TunnelState.POLLING)
        try:
            self._spawn(session)
        except HarborError as exc:
            session.fail(exc.message)
            return ServiceResult.from_exception("tunnel", exc)

        warnings: list[str] = []
        error: HarborError | None = None
        with self._owned_session(session, warnings) as release:
            try:
                session.public_url = self._poll(session)
            except HarborError as exc:
                error = exc
            else:
                session.advance(TunnelState.READY)
                release()

        if error is not None:
            session.fail(error.message)
            return ServiceResult.from_exception("tunnel", error, warnings=warnings)

        log.info("tunnel ready", service=handle, url=session.public_url, elapsed=session.elapsed)
        return ServiceResult(
            ok=True,
            op="tunnel",
            data={
                "service": handle,
                "name": session.name,
                "internal_url": session.internal_url,
                "public_url": session.public_url,
                "state": str(session.state),
            },
            meta={"elapsed_s": round(session.elapsed, 2)},
        )

    def expose_defaults(self) -> list[ServiceResult]:
        """Expose every service listed under ``services.tunnels``."""
        return [self.expose(handle) for handle in self._store.list(DEFAULT_TUNNELS_KEY)]

    def _spawn(self, session: TunnelSession) -> None:
        cfg = self._settings.tunnel
        plan = self._compose.resolve(tags=[cfg.service])
        argv = plan.args(
            "run", "-d", "--name", session.name, cfg.service, "--url", session.internal_url
        )
        proc = self._engine.run(argv, capture=True)
        if proc.returncode != 0:
            msg = f"Failed to start tunnel container {session.name!r}"
            raise SpawnError(
                msg,
                service=session.target_service,
                returncode=proc.returncode,
                stderr=(proc.stderr or "").strip(),
            )
        session.process_handle = (proc.stdout or "").strip() or session.name

    @contextmanager
    def _owned_session(
        self, session: TunnelSession, warnings: list[str]
    ) -> Generator[Callable[[], None]]:
        """Stop the session's container on exit unless ownership was released."""
        owned = True

        def release() -> None:
            nonlocal owned
            owned = False

        try:
            yield release
        finally:
            if owned:
                log.info("stopping tunnel container", name=session.name)
                msg = f"Failed to stop tunnel container {session.name!r}"
                try:
                    stopped = self._engine.stop(session.name)
                except HarborError as exc:
                    stopped = False
                    msg = f"{msg}: {exc.message}"
                if not stopped:
                    log.warning(msg, service=session.target_service)
                    warnings.append(msg)

    def _poll(self, session: TunnelSession) -> str:
        """Poll container output until a URL appears or the bound elapses.

        Raises:
            TunnelTimeout: No URL within ``tunnel.timeout`` seconds.
            EndpointUnavailable: The container disappeared mid-poll.
        """
        cfg = self._settings.tunnel
        started = self._clock()
        while True:
            session.elapsed = self._clock() - started
            if session.elapsed >= cfg.timeout:
                msg = f"Failed to obtain tunnel URL within {cfg.timeout:g} seconds"
                raise TunnelTimeout(
                    msg,
                    service=session.target_service,
                    name=session.name,
                    elapsed=round(session.elapsed, 2),
                )
            self._sleep(cfg.poll_interval)
            session.elapsed = self._clock() - started

            output = self._engine.logs_tail(session.name, cfg.log_tail)
            url = extract_tunnel_url(output)
            if url is not None:
                return url
            if session.name not in self._engine.ps_names(session.name):
                msg = f"Tunnel container {session.name!r} stopped before a URL appeared"
                raise EndpointUnavailable(
                    msg, service=session.target_service, elapsed=round(session.elapsed, 2)
                )
            log.debug("waiting for tunnel URL", name=session.name, elapsed=session.elapsed)

    # ------------------------------------------------------------------
    # teardown
    # ------------------------------------------------------------------

    def teardown_all(self) -> ServiceResult:
        """Stop every tunnel container, including ones from earlier invocations."""
        pattern = session_filter(self._settings.tunnel.name_prefix, self.container_prefix)
        try:
            names = self._engine.ps_names(pattern)
            stopped = self._engine.stop(*names)
        except HarborError as exc:
            return ServiceResult.from_exception("tunnel_down", exc)
        if not stopped:
            return ServiceResult.failure(
                "tunnel_down",
                ErrorCode.UNAVAILABLE,
                "Failed to stop tunnel containers",
                names=names,
            )
        log.info("stopped tunnels", count=len(names))
        return ServiceResult(
            ok=True, op="tunnel_down", data={"count": len(names), "stopped": names}
        )
