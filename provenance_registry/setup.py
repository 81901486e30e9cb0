# -*- coding: utf-8 -*-
"""
Provenance Registry Service Setup

Provides ``configure_provenance_registry(app)`` which wires up the
registry, its block clock and the REST API on a FastAPI application.

Also exposes ``get_provenance_registry(app)`` for programmatic access and
the ``ProvenanceRegistryService`` facade class.

The caller of every HTTP operation is the principal named in the
``X-Principal`` header (configurable); authenticating that header is the
job of the gateway in front of this service. ``now`` comes from the
service's ``BlockClock``.

Usage:
    >>> from fastapi import FastAPI
    >>> from provenance_registry.setup import configure_provenance_registry
    >>> app = FastAPI()
    >>> configure_provenance_registry(app)

Author: Provenance Registry Team
Date: October 2026
Status: Production Ready
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from provenance_registry.config import ProvenanceRegistryConfig, get_config
from provenance_registry.exceptions import ErrorKind, ProvenanceRegistryError
from provenance_registry.models import (
    AugmentLabelsRequest,
    AuthenticityVerification,
    CallContext,
    Diagnostics,
    GrantAccessRequest,
    LabelsResponse,
    OperationResponse,
    ProvenanceRecord,
    RecordAnalytics,
    RegisterRequest,
    RegisterResponse,
    ReviseRequest,
    TransferCustodyRequest,
)
from provenance_registry.registry import ProvenanceRegistry

logger = logging.getLogger(__name__)


# ===================================================================
# HTTP status per error kind
# ===================================================================

HTTP_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.MISSING_RECORD: 404,
    ErrorKind.DUPLICATE_REGISTRATION: 409,
    ErrorKind.INVALID_METADATA_FORMAT: 400,
    ErrorKind.SIZE_CONSTRAINT_VIOLATED: 400,
    ErrorKind.METADATA_VALIDATION_ERROR: 400,
    ErrorKind.OWNERSHIP_MISMATCH: 403,
    ErrorKind.UNAUTHORIZED_OPERATION: 403,
    ErrorKind.ADMIN_PRIVILEGES_REQUIRED: 403,
    ErrorKind.ACCESS_DENIED: 403,
}


# ===================================================================
# Block clock
# ===================================================================


class BlockClock:
    """Non-decreasing integer timestamp source.

    Wraps ``source`` (wall-clock seconds by default) and never returns a
    value lower than one it has already returned.
    """

    def __init__(self, source: Optional[Callable[[], int]] = None) -> None:
        self._source = source or (lambda: int(time.time()))
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            self._last = max(int(self._source()), self._last)
            return self._last


# ===================================================================
# ProvenanceRegistryService facade
# ===================================================================

_singleton_lock = threading.Lock()
_singleton_instance: Optional["ProvenanceRegistryService"] = None


class ProvenanceRegistryService:
    """Unified facade over the provenance registry.

    Attributes:
        config: ProvenanceRegistryConfig instance.
        registry: ProvenanceRegistry instance.
        clock: BlockClock supplying ``now`` for each call.

    Example:
        >>> service = ProvenanceRegistryService()
        >>> ctx = service.context_for("alice")
        >>> record_id = service.registry.register(ctx, "a.bin", 10, "x", ["a"])
    """

    def __init__(
        self,
        config: Optional[ProvenanceRegistryConfig] = None,
        clock: Optional[BlockClock] = None,
    ) -> None:
        """Initialize the service facade.

        Args:
            config: Optional config. Uses global config if None.
            clock: Optional timestamp source. Wall-clock seconds if None.
        """
        self.config = config or get_config()
        self.registry = ProvenanceRegistry(config=self.config)
        self.clock = clock or BlockClock()

        self._started = False
        self._start_time: Optional[float] = None

        logger.info("ProvenanceRegistryService facade created")

    def context_for(self, caller: str) -> CallContext:
        """Build the call context for ``caller`` at the current clock value."""
        return CallContext(caller=caller, now=self.clock.now())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def startup(self) -> None:
        """Start the service. Safe to call multiple times."""
        if self._started:
            logger.debug("ProvenanceRegistryService already started; skipping")
            return

        logging.getLogger("provenance_registry").setLevel(self.config.log_level)
        self._started = True
        self._start_time = time.time()
        logger.info("ProvenanceRegistryService startup complete")

    def shutdown(self) -> None:
        """Shutdown the service."""
        if not self._started:
            return
        self._started = False
        logger.info("ProvenanceRegistryService shut down")

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def get_metrics(self) -> Dict[str, Any]:
        """Get a service metrics summary."""
        uptime = time.time() - self._start_time if self._start_time else 0.0
        summary = {
            "started": self._started,
            "uptime_seconds": uptime,
            "administrator": self.registry.administrator,
            "audit_enabled": self.config.enable_audit,
        }
        summary.update(self.registry.get_statistics())
        return summary


# ===================================================================
# Thread-safe singleton access
# ===================================================================


def _get_singleton() -> ProvenanceRegistryService:
    global _singleton_instance
    if _singleton_instance is None:
        with _singleton_lock:
            if _singleton_instance is None:
                _singleton_instance = ProvenanceRegistryService()
    return _singleton_instance


# ===================================================================
# FastAPI integration
# ===================================================================


def configure_provenance_registry(
    app: Any,
    config: Optional[ProvenanceRegistryConfig] = None,
    clock: Optional[BlockClock] = None,
) -> ProvenanceRegistryService:
    """Configure the provenance registry on a FastAPI application.

    Creates the service, stores it in ``app.state``, mounts the API
    router and starts the service.

    Args:
        app: FastAPI application instance.
        config: Optional registry config.
        clock: Optional timestamp source.

    Returns:
        ProvenanceRegistryService instance.
    """
    global _singleton_instance

    service = ProvenanceRegistryService(config=config, clock=clock)

    with _singleton_lock:
        _singleton_instance = service

    app.state.provenance_registry_service = service
    app.include_router(get_router(service))
    logger.info("Provenance registry API router mounted at %s", service.config.api_prefix)

    service.startup()
    return service


def get_provenance_registry(app: Any) -> ProvenanceRegistryService:
    """Get the ProvenanceRegistryService instance from app state.

    Raises:
        RuntimeError: If the service was not configured on the app.
    """
    service = getattr(app.state, "provenance_registry_service", None)
    if service is None:
        raise RuntimeError(
            "Provenance registry not configured. "
            "Call configure_provenance_registry(app) first."
        )
    return service


def get_router(service: Optional[ProvenanceRegistryService] = None) -> APIRouter:
    """Build the provenance registry API router.

    Args:
        service: Service the routes operate on. Uses the singleton if None.

    Returns:
        FastAPI APIRouter mounted at ``config.api_prefix``.
    """
    svc = service or _get_singleton()
    registry = svc.registry

    router = APIRouter(
        prefix=svc.config.api_prefix,
        tags=["provenance-registry"],
    )

    def _context(request: Request) -> CallContext:
        """Resolve the calling principal from the configured header."""
        caller = request.headers.get(svc.config.principal_header)
        if not caller:
            raise HTTPException(
                status_code=401,
                detail=f"Missing {svc.config.principal_header} header",
            )
        return svc.context_for(caller)

    def _invoke(operation: Callable[..., Any], *args: Any) -> Any:
        try:
            return operation(*args)
        except ProvenanceRegistryError as exc:
            raise HTTPException(
                status_code=HTTP_STATUS_BY_KIND.get(exc.kind, 400),
                detail=exc.to_dict(),
            ) from exc

    # ------------------------------------------------------------------
    # 1. POST /records - Register a record
    # ------------------------------------------------------------------
    @router.post("/records", response_model=RegisterResponse, status_code=201)
    async def post_register(
        body: RegisterRequest,
        ctx: CallContext = Depends(_context),
    ) -> RegisterResponse:
        """Register an asset with the caller as custodian."""
        record_id = _invoke(
            registry.register,
            ctx,
            body.asset_designation,
            body.binary_footprint,
            body.descriptive_summary,
            body.classification_labels,
        )
        return RegisterResponse(record_identifier=record_id)

    # ------------------------------------------------------------------
    # 2. GET /records/{record_id} - Read a record
    # ------------------------------------------------------------------
    @router.get("/records/{record_id}", response_model=ProvenanceRecord)
    async def get_record(
        record_id: int,
        ctx: CallContext = Depends(_context),
    ) -> ProvenanceRecord:
        """Read a record as custodian, grant holder or administrator."""
        return _invoke(registry.get_record, ctx, record_id)

    # ------------------------------------------------------------------
    # 3. PUT /records/{record_id} - Revise a record
    # ------------------------------------------------------------------
    @router.put("/records/{record_id}", response_model=OperationResponse)
    async def put_revise(
        record_id: int,
        body: ReviseRequest,
        ctx: CallContext = Depends(_context),
    ) -> OperationResponse:
        """Overwrite the mutable fields of a record."""
        _invoke(
            registry.revise,
            ctx,
            record_id,
            body.asset_designation,
            body.binary_footprint,
            body.descriptive_summary,
            body.classification_labels,
        )
        return OperationResponse(record_identifier=record_id)

    # ------------------------------------------------------------------
    # 4. DELETE /records/{record_id} - Delete a record
    # ------------------------------------------------------------------
    @router.delete("/records/{record_id}", response_model=OperationResponse)
    async def delete_record(
        record_id: int,
        ctx: CallContext = Depends(_context),
    ) -> OperationResponse:
        """Permanently delete a record."""
        _invoke(registry.delete, ctx, record_id)
        return OperationResponse(record_identifier=record_id)

    # ------------------------------------------------------------------
    # 5. POST /records/{record_id}/custody - Transfer custody
    # ------------------------------------------------------------------
    @router.post("/records/{record_id}/custody", response_model=OperationResponse)
    async def post_transfer_custody(
        record_id: int,
        body: TransferCustodyRequest,
        ctx: CallContext = Depends(_context),
    ) -> OperationResponse:
        """Transfer custody of a record to a successor."""
        _invoke(registry.transfer_custody, ctx, record_id, body.successor)
        return OperationResponse(record_identifier=record_id)

    # ------------------------------------------------------------------
    # 6. POST /records/{record_id}/grants - Grant read access
    # ------------------------------------------------------------------
    @router.post("/records/{record_id}/grants", response_model=OperationResponse)
    async def post_grant_access(
        record_id: int,
        body: GrantAccessRequest,
        ctx: CallContext = Depends(_context),
    ) -> OperationResponse:
        """Grant read access to an accessor."""
        _invoke(registry.grant_access, ctx, record_id, body.accessor)
        return OperationResponse(record_identifier=record_id)

    # ------------------------------------------------------------------
    # 7. DELETE /records/{record_id}/grants/{accessor} - Revoke read access
    # ------------------------------------------------------------------
    @router.delete(
        "/records/{record_id}/grants/{accessor}",
        response_model=OperationResponse,
    )
    async def delete_grant(
        record_id: int,
        accessor: str,
        ctx: CallContext = Depends(_context),
    ) -> OperationResponse:
        """Revoke an accessor's read access."""
        _invoke(registry.revoke_access, ctx, record_id, accessor)
        return OperationResponse(record_identifier=record_id)

    # ------------------------------------------------------------------
    # 8. POST /records/{record_id}/labels - Augment labels
    # ------------------------------------------------------------------
    @router.post("/records/{record_id}/labels", response_model=LabelsResponse)
    async def post_augment_labels(
        record_id: int,
        body: AugmentLabelsRequest,
        ctx: CallContext = Depends(_context),
    ) -> LabelsResponse:
        """Append classification labels to a record."""
        labels = _invoke(registry.augment_labels, ctx, record_id, body.labels)
        return LabelsResponse(
            record_identifier=record_id, classification_labels=labels,
        )

    # ------------------------------------------------------------------
    # 9. POST /records/{record_id}/archival - Mark archival
    # ------------------------------------------------------------------
    @router.post("/records/{record_id}/archival", response_model=OperationResponse)
    async def post_mark_archival(
        record_id: int,
        ctx: CallContext = Depends(_context),
    ) -> OperationResponse:
        """Append the HISTORICAL-RECORD label to a record."""
        _invoke(registry.mark_archival, ctx, record_id)
        return OperationResponse(record_identifier=record_id)

    # ------------------------------------------------------------------
    # 10. GET /records/{record_id}/analytics - Record analytics
    # ------------------------------------------------------------------
    @router.get("/records/{record_id}/analytics", response_model=RecordAnalytics)
    async def get_analytics(
        record_id: int,
        ctx: CallContext = Depends(_context),
    ) -> RecordAnalytics:
        """Age, footprint and label count of a record."""
        return _invoke(registry.get_analytics, ctx, record_id)

    # ------------------------------------------------------------------
    # 11. GET /records/{record_id}/verify - Verify claimed custodian
    # ------------------------------------------------------------------
    @router.get(
        "/records/{record_id}/verify",
        response_model=AuthenticityVerification,
    )
    async def get_verify_authenticity(
        record_id: int,
        claimed_custodian: str = Query(...),
        ctx: CallContext = Depends(_context),
    ) -> AuthenticityVerification:
        """Check a claimed custodian against the record."""
        return _invoke(
            registry.verify_authenticity, ctx, record_id, claimed_custodian,
        )

    # ------------------------------------------------------------------
    # 12. POST /records/{record_id}/security - Security gate
    # ------------------------------------------------------------------
    @router.post("/records/{record_id}/security", response_model=OperationResponse)
    async def post_security_protocol(
        record_id: int,
        ctx: CallContext = Depends(_context),
    ) -> OperationResponse:
        """Administrator-or-custodian security gate."""
        _invoke(registry.security_protocol, ctx, record_id)
        return OperationResponse(record_identifier=record_id)

    # ------------------------------------------------------------------
    # 13. GET /diagnostics - Administrator diagnostics
    # ------------------------------------------------------------------
    @router.get("/diagnostics", response_model=Diagnostics)
    async def get_diagnostics(
        ctx: CallContext = Depends(_context),
    ) -> Diagnostics:
        """Administrator-only registry diagnostics."""
        return _invoke(registry.diagnostics, ctx)

    return router


__all__ = [
    "HTTP_STATUS_BY_KIND",
    "BlockClock",
    "ProvenanceRegistryService",
    "configure_provenance_registry",
    "get_provenance_registry",
    "get_router",
]
