# COMPONENT: FASTAPI DEMO APPLICATION ENTRY POINT
# REQUIREMENTS SATISFIED:
#   - Middleware configuration (exchange logging)
#   - Health endpoint used to exercise the finalize interceptor
#   - AWS Lambda compatibility via Mangum
"""
exchange_tap/main.py

Demo application wiring the exchange logger into FastAPI.

Execution Order (Intentional):
    1. Environment variables are loaded from .env
    2. The shared logger is configured once from LOG_LEVEL / LOG_FILE (on import)
    3. FastAPI app is created
    4. The exchange logging ASGI middleware is attached
    5. The health router is mounted
    6. The Mangum handler is created for AWS Lambda deployment
"""
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from mangum import Mangum

from exchange_tap.api.middleware.log_requests import ExchangeLoggerASGI
from exchange_tap.api.routers.health import router as health_router
from exchange_tap.utils.logging import logger as shared_logger, make_line_logger


def create_app(logger=None) -> FastAPI:
    if logger is None:
        logger = make_line_logger(shared_logger)

    app = FastAPI(title="exchange-tap demo")
    app.add_middleware(ExchangeLoggerASGI, logger=logger)
    app.include_router(health_router)
    return app


app = create_app()

handler = Mangum(app)
