from fastapi import APIRouter

from cashflow_forecast.db.connection import db_pool

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    return {
        "status": "ok",
        "database": db_pool.test_connection(),
    }
