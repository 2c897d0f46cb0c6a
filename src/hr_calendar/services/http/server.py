from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from ...api import ApiFunctionNotFoundError, acall_api, api_state, get_api_functions
from ...api.models import ApiCallRequest
from ...domain import DayNotFoundError, PartialMoveError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    service = api_state.calendar
    if not service.is_loaded:
        await service.load()
    yield


app = FastAPI(title="HR Calendar API", version="0.1.0", lifespan=lifespan)


@app.get("/api/functions")
async def list_api_functions() -> JSONResponse:
    return JSONResponse({"functions": [func.describe() for func in get_api_functions()]})


@app.post("/api/functions/{function_name}")
async def invoke_api_function(function_name: str, request: ApiCallRequest) -> JSONResponse:
    try:
        result = await acall_api(function_name, **request.arguments)
    except ApiFunctionNotFoundError as exc:
        logger.warning("API function not found: %s", function_name)
        raise HTTPException(status_code=404, detail={"message": str(exc)}) from exc
    except TypeError as exc:
        raise HTTPException(status_code=400, detail={"message": f"Invalid arguments: {exc}"}) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail={"message": str(exc)}) from exc
    except DayNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"message": str(exc)}) from exc
    except PartialMoveError as exc:
        logger.error("API function %s left a partial move: %s", function_name, exc)
        raise HTTPException(status_code=502, detail={"message": str(exc), "partial": True}) from exc
    except PersistenceError as exc:
        logger.error("API function %s failed to persist: %s", function_name, exc)
        raise HTTPException(status_code=502, detail={"message": str(exc), "partial": False}) from exc
    logger.debug("API function %s executed successfully", function_name)
    return JSONResponse({"name": function_name, "result": result})


def run_local_server(host: str = "127.0.0.1", port: int = 8000) -> None:
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    asyncio.run(serve(app, config))
