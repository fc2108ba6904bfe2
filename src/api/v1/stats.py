from fastapi import APIRouter, Depends

from src.schemas.res.leaderboard import PlatformStatsResponse
from src.services.stats import StatsService

stats_router = APIRouter()


@stats_router.get("", response_model=PlatformStatsResponse)
async def platform_stats(stats_service: StatsService = Depends(StatsService)):
    return await stats_service.get_platform_stats()
