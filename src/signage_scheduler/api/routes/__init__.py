from fastapi import APIRouter

from . import player_devices, schedules, system

api_router = APIRouter()

api_router.include_router(system.router, prefix="/system", tags=["system"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
api_router.include_router(player_devices.router, prefix="/player-devices", tags=["player_devices"])
