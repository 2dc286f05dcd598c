"""FastAPI web application for PVR"""

import logging
from fastapi import FastAPI

from pvr.core.config import get_config
from pvr.core.services import Services, create_services

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="PVR", description="Recorded content manager")

from pvr.web.recorded_api import router as recorded_router
app.include_router(recorded_router)

# Global instances
services: Services = None
maintenance_stop = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    global services, maintenance_stop

    if services is not None:
        return

    logger.info("Starting PVR...")
    config = get_config()
    services = create_services(config)

    # Schedule periodic maintenance (history retention and file reconciliation)
    from pvr.core.maintenance import schedule_maintenance
    _, maintenance_stop = schedule_maintenance(
        services.recorded_manager,
        services.file_cleaner,
        interval_hours=config.get('maintenance.interval_hours', 24),
        run_on_startup=config.get('maintenance.run_on_startup', True)
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Stop maintenance and active recordings on shutdown"""
    if maintenance_stop is not None:
        maintenance_stop.set()
    if services is not None:
        services.recording_manager.stop_all()
    logger.info("PVR stopped")
