from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pathlib import Path
import json

app = FastAPI(title="Mock Clinic Records Server", version="1.0.0")
DATA_DIR = Path(__file__).resolve().parent / "records_stub"


def _load_client(client_id: int) -> dict:
    file = DATA_DIR / f"client_{client_id}.json"
    if not file.exists():
        raise HTTPException(status_code=404, detail="client not found")
    return json.loads(file.read_text())


@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/clients/{client_id}/budget-items")
def get_budget_items(client_id: int):
    return JSONResponse(content=_load_client(client_id).get("budgetItems", []))

@app.get("/clients/{client_id}/budget-settings")
def get_budget_settings(client_id: int):
    settings = _load_client(client_id).get("budgetSettings")
    if settings is None:
        raise HTTPException(status_code=404, detail="no budget settings")
    return JSONResponse(content=settings)

@app.get("/clients/{client_id}/sessions")
def get_sessions(client_id: int):
    return JSONResponse(content=_load_client(client_id).get("sessions", []))
