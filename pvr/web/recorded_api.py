"""API endpoints for recorded programs and their video files"""

import logging
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from pvr.core.exceptions import NotFoundError, PathUnresolvedError, PVRError
from pvr.core.models import AddVideoFileOption

logger = logging.getLogger(__name__)

router = APIRouter()


class AddVideoFileRequest(BaseModel):
    """Register a video file that already exists under a recording root"""
    recordedId: int
    parentDirectoryName: str
    filePath: str
    type: str
    name: str


def _error_detail(e: PVRError):
    return {'message': str(e), **e.details}


def _get_services():
    from pvr.web.api import services

    if not services:
        raise HTTPException(status_code=503, detail="Recorded services not initialized")
    return services


@router.delete("/api/recorded/{recorded_id}")
async def delete_recorded(recorded_id: int):
    """Delete a recorded program with all of its files"""
    services = _get_services()
    try:
        report = services.recorded_manager.delete(recorded_id)
        return {'success': True, 'report': report.to_dict()}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))
    except Exception as e:
        logger.error(f"Error deleting recorded {recorded_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/api/recorded/{recorded_id}/protect")
async def protect_recorded(recorded_id: int):
    """Protect a recorded program"""
    return _change_protect(recorded_id, True)


@router.put("/api/recorded/{recorded_id}/unprotect")
async def unprotect_recorded(recorded_id: int):
    """Remove protection from a recorded program"""
    return _change_protect(recorded_id, False)


def _change_protect(recorded_id: int, is_protect: bool):
    services = _get_services()
    try:
        services.recorded_manager.change_protect(recorded_id, is_protect)
        return {'success': True, 'recordedId': recorded_id, 'isProtected': is_protect}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))
    except Exception as e:
        logger.error(f"Error changing protect for {recorded_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/videos", status_code=201)
async def add_video_file(request: AddVideoFileRequest):
    """Register a video file"""
    services = _get_services()
    try:
        video_file_id = services.recorded_manager.add_video_file(AddVideoFileOption(
            recorded_id=request.recordedId,
            parent_directory_name=request.parentDirectoryName,
            file_path=request.filePath,
            type=request.type,
            name=request.name
        ))
        return {'videoFileId': video_file_id}
    except PathUnresolvedError as e:
        raise HTTPException(status_code=400, detail=_error_detail(e))
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Video file not found on disk: {e.filename}")
    except Exception as e:
        logger.error(f"Error adding video file {request.filePath}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/api/videos/{video_file_id}")
async def delete_video_file(video_file_id: int):
    """Delete a video file (and its recorded program if it was the last one)"""
    services = _get_services()
    try:
        report = services.recorded_manager.delete_video_file(video_file_id)
        return {
            'success': True,
            'recordedDeleted': report is not None,
            'report': report.to_dict() if report is not None else None
        }
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))
    except Exception as e:
        logger.error(f"Error deleting video file {video_file_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/api/videos/{video_file_id}/size")
async def update_video_file_size(video_file_id: int):
    """Refresh the stored size of a video file from disk"""
    services = _get_services()
    try:
        size = services.recorded_manager.update_video_file_size(video_file_id)
        return {'success': True, 'videoFileId': video_file_id, 'size': size}
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=_error_detail(e))
    except Exception as e:
        logger.error(f"Error updating size of video file {video_file_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/recorded/cleanup")
async def cleanup_recorded():
    """Run both file reconciliation sweeps now"""
    services = _get_services()
    video_report = services.file_cleaner.video_file_cleanup()
    drop_log_report = services.file_cleaner.drop_log_file_cleanup()
    return {
        'success': True,
        'videoFiles': video_report.to_dict(),
        'dropLogFiles': drop_log_report.to_dict()
    }
