from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional
import structlog

from freight_rates import __version__
from freight_rates.config.settings import configure_logging
from freight_rates.services.record_service import build_manual_record
from freight_rates.api.state import settings, resolver, directory, pipeline

configure_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Freight Rates API",
    description="Contractual payout resolution and CSV import for CDD delivery runs",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class RateRequest(BaseModel):
    facility: str
    vehicle_text: str
    count: int
    city: str = ""
    region: str = ""


class RecordRequest(RateRequest):
    plate: str
    date: str = ""
    map_ref: str = ""
    driver_name: str = ""


class ImportRequest(BaseModel):
    text: str
    facility: Optional[str] = None


@app.get("/")
async def root():
    return {"status": "online", "message": "Freight Rates API Active"}


@app.post("/rate")
async def rate(req: RateRequest):
    try:
        quote = resolver.quote(req.facility, req.vehicle_text, req.count, req.city, req.region)
        return {
            "price": quote.price,
            "vehicle_class": quote.vehicle_class,
            "special": quote.special,
            "trace": jsonable_encoder(quote.trace),
        }
    except Exception as e:
        logger.exception("rate_failed", facility=req.facility)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/records")
async def create_record(req: RecordRequest):
    try:
        record = build_manual_record(
            facility=req.facility,
            plate=req.plate,
            vehicle_text=req.vehicle_text,
            count=req.count,
            city=req.city,
            region=req.region,
            run_date=req.date,
            map_ref=req.map_ref,
            driver_name=req.driver_name,
            resolver=resolver,
            directory=directory,
            settings=settings,
        )
        return record.to_dict()
    except Exception as e:
        logger.exception("record_failed", facility=req.facility)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/import")
async def import_csv(req: ImportRequest):
    try:
        result = pipeline.run(req.text, req.facility)
    except Exception as e:
        logger.exception("import_failed", facility=req.facility)
        raise HTTPException(status_code=500, detail=str(e))

    if result.is_total_failure:
        logger.warning("import_rejected", **result.summary())
        raise HTTPException(
            status_code=422,
            detail={"message": "No valid records found in file", **result.summary()},
        )
    return {
        **result.summary(),
        "records": [r.to_dict() for r in result.records],
        "failures": jsonable_encoder(result.failures),
    }


@app.get("/drivers/{plate}")
async def get_driver(plate: str):
    entry = directory.lookup(plate)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Plate {plate} is not on the roster")
    return jsonable_encoder(entry)


@app.get("/tariffs")
async def get_tariffs():
    return [
        {**jsonable_encoder(rule), "zone": "special" if rule.special else "standard"}
        for rule in resolver.tariff_table.rules
    ]


@app.get("/system/status")
async def get_status():
    return {
        "engine_active": True,
        "version": __version__,
        "tariff_rules": len(resolver.tariff_table.rules),
        "drivers": len(directory),
        "default_facility": settings.default_facility,
        "data_dir": str(settings.data_dir),
    }
