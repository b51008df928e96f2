#!/usr/bin/env python3
"""
HOC FastAPI Server
Provides a REST API for parsing contracts and checking values against them
"""
import logging
from typing import Any, List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from hoc.core.checker import check
from hoc.core.config import VERSION, get_settings
from hoc.core.errors import HocError, PredicateFailure
from hoc.core.models import FlatContract, FunctionContract, contract_depth
from hoc.parser import parse_contract
from hoc.predicates import default_registry

logger = logging.getLogger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================

class ParseRequest(BaseModel):
    contract: str


class ParseResponse(BaseModel):
    success: bool
    contract: Optional[str] = None
    kind: Optional[str] = None
    arity: Optional[int] = None
    depth: Optional[int] = None
    error: Optional[str] = None


class CheckRequest(BaseModel):
    contract: str
    value: Any = None
    name: Optional[str] = ""


class CheckResponse(BaseModel):
    success: bool
    passed: Optional[bool] = None
    violation: Optional[dict] = None
    report: Optional[str] = None
    error: Optional[str] = None


class PredicatesResponse(BaseModel):
    predicates: List[str]


class HealthResponse(BaseModel):
    status: str
    version: str
    predicates: int


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="HOC API",
    description="Higher-order contract checking with blame",
    version=VERSION
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    return {
        "status": "ok",
        "version": VERSION,
        "predicates": len(default_registry)
    }


@app.get("/api/predicates", response_model=PredicatesResponse)
async def predicates():
    """Names usable in contract notation"""
    return {"predicates": default_registry.names()}


@app.post("/api/parse", response_model=ParseResponse)
async def parse(request: ParseRequest):
    """
    Parse contract notation and describe the resulting contract.

    Example:
        POST /api/parse
        {"contract": "(-> (-> even? odd?) even? even?)"}
    """
    try:
        contract = parse_contract(request.contract)
    except HocError as e:
        return {"success": False, "error": str(e)}

    return {
        "success": True,
        "contract": str(contract),
        "kind": "function" if isinstance(contract, FunctionContract) else "flat",
        "arity": contract.arity if isinstance(contract, FunctionContract) else None,
        "depth": contract_depth(contract)
    }


@app.post("/api/check", response_model=CheckResponse)
async def check_value(request: CheckRequest):
    """
    Check a JSON value against a flat contract.

    Example:
        POST /api/check
        {"contract": "(and/c integer? positive?)", "value": 10.1}
    """
    try:
        contract = parse_contract(request.contract)
        if not isinstance(contract, FlatContract):
            return {
                "success": False,
                "error": f"{contract} is a function contract; only flat contracts can check a value"
            }
        blame = check(contract, request.value, name=request.name or "")
    except PredicateFailure as e:
        logger.warning("predicate failed during check: %s", e)
        return {"success": False, "error": str(e)}
    except HocError as e:
        return {"success": False, "error": str(e)}

    if blame is None:
        return {"success": True, "passed": True}
    return {
        "success": True,
        "passed": False,
        "violation": blame.to_dict(),
        "report": blame.report()
    }


# ============================================================================
# Run Server
# ============================================================================

def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    print("=" * 60)
    print("HOC API Server")
    print("=" * 60)
    print(f"Starting server on http://{host}:{port}")
    print(f"API docs: http://{host}:{port}/docs")
    print("=" * 60)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
