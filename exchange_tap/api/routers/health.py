import time

from fastapi import APIRouter

router = APIRouter()

_START_TIME = time.time()


@router.get("/")
@router.get("/api/health")
def get_health():
    return {"message": "OK", "uptime": time.time() - _START_TIME}
