import asyncio
import logging
import random
import time
from pathlib import Path
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from registry import (
    CorruptDataError,
    NoRecords,
    PersistedCollection,
    ReadError,
    StoreUnavailable,
    StoreUninitialized,
    VehicleRecord,
    VehicleStore,
    WriteError,
)

from .config import Settings, load_settings
from .models import HealthStatus, ImageUploaded, UpsertRequest, VehicleCreated, VehicleUpdated

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def get_store(request: Request) -> VehicleStore:
    return request.app.state.store


def image_filename(original: str, number_plate: Optional[str]) -> str:
    """Name an upload after its plate, or a timestamp plus random suffix."""
    extension = Path(original).suffix
    if number_plate:
        return f"{number_plate}{extension}"
    unique_suffix = f"{int(time.time() * 1000)}-{round(random.random() * 1e9)}"
    return unique_suffix + extension


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    settings.images_dir.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = VehicleStore(PersistedCollection(settings.vehicles_path))
        logger.info("Starting Vehicle Registry API with data at %s", settings.vehicles_path)
        yield
        logger.info("Shutting down Vehicle Registry API")

    app = FastAPI(
        title="Vehicle Registry API",
        description="Stores vehicles keyed by number plate and their images",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.mount("/images", StaticFiles(directory=settings.images_dir), name="images")

    @app.get("/health", response_model=HealthStatus)
    async def health_check(store: VehicleStore = Depends(get_store)):
        initialized = await store.initialized()
        count = None
        if initialized:
            try:
                count = len(await store.list())
            except (CorruptDataError, ReadError):
                logger.warning("Vehicle data at %s is unreadable", settings.vehicles_path)
        return HealthStatus(
            status="healthy",
            data_path=str(settings.vehicles_path),
            initialized=initialized,
            vehicle_count=count,
        )

    @app.get("/config")
    async def client_config():
        """Public Firebase web configuration for the frontend."""
        return settings.firebase

    @app.post("/upload", response_model=ImageUploaded)
    async def upload_image(
        image: Optional[UploadFile] = File(None),
        numberPlate: Optional[str] = Form(None),
    ):
        if image is None:
            raise HTTPException(status_code=400, detail="No file uploaded.")

        filename = image_filename(image.filename or "", numberPlate)
        target = settings.images_dir / filename
        if numberPlate and (
            Path(numberPlate).name != numberPlate
            or target.resolve().parent != settings.images_dir.resolve()
        ):
            raise HTTPException(status_code=400, detail=f"Invalid number plate {numberPlate!r}")

        content = await image.read()
        await asyncio.to_thread(target.write_bytes, content)
        logger.info("Stored image %s (%d bytes)", filename, len(content))
        return ImageUploaded(imageUrl=f"/images/{filename}")

    @app.post("/api/vehicles", status_code=201, response_model=VehicleCreated)
    async def create_vehicle(vehicle: VehicleRecord, store: VehicleStore = Depends(get_store)):
        """Append a vehicle to the collection as-is"""
        try:
            stored = await store.create(vehicle)
        except StoreUnavailable:
            logger.exception("Error saving vehicle %s", vehicle.number_plate)
            raise HTTPException(status_code=500, detail="Failed to save vehicle data")
        return VehicleCreated(newVehicle=stored)

    @app.get("/api/vehicles")
    async def list_vehicles(store: VehicleStore = Depends(get_store)):
        """Get every stored vehicle"""
        try:
            return await store.list()
        except StoreUninitialized:
            raise HTTPException(status_code=404, detail="Vehicle data not found")
        except CorruptDataError:
            logger.exception("Error parsing vehicle data")
            raise HTTPException(status_code=500, detail="Invalid JSON in vehicle data")
        except ReadError:
            logger.exception("Error reading vehicle data")
            raise HTTPException(status_code=500, detail="Failed to read vehicle data")

    @app.get("/api/vehicles/{number_plate}")
    async def get_vehicle(number_plate: str, store: VehicleStore = Depends(get_store)):
        """Get a specific vehicle by number plate"""
        try:
            vehicle = await store.get(number_plate)
        except StoreUninitialized:
            raise HTTPException(status_code=404, detail="Vehicle data not found")
        except CorruptDataError:
            logger.exception("Error parsing vehicle data")
            raise HTTPException(status_code=500, detail="Invalid JSON in vehicle data")
        except ReadError:
            logger.exception("Error reading vehicle data")
            raise HTTPException(status_code=500, detail="Failed to read vehicle data")

        if vehicle is None:
            raise HTTPException(status_code=404, detail=f"Vehicle with number plate {number_plate} not found")
        return vehicle

    @app.patch("/api/vehicles")
    async def upsert_vehicle(
        payload: UpsertRequest,
        response: Response,
        store: VehicleStore = Depends(get_store),
    ):
        """Update the vehicle with a matching number plate, or add it if the plate is new"""
        try:
            result = await store.upsert(payload.new_car)
        except StoreUninitialized:
            raise HTTPException(status_code=404, detail="Vehicle data not found")
        except NoRecords:
            raise HTTPException(status_code=404, detail="No vehicles to update")
        except CorruptDataError:
            logger.exception("Error parsing vehicle data")
            raise HTTPException(status_code=500, detail="Invalid JSON in Vehicles.json")
        except ReadError:
            logger.exception("Error reading vehicle data")
            raise HTTPException(status_code=500, detail="Failed to read vehicle data")
        except WriteError as exc:
            logger.exception("Error writing vehicle %s", payload.new_car.number_plate)
            detail = "Failed to add new vehicle data" if exc.created else "Failed to update vehicle data"
            raise HTTPException(status_code=500, detail=detail)

        if result.created:
            response.status_code = 201
            return VehicleCreated(newVehicle=result.record)
        return VehicleUpdated(updatedVehicle=result.record)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
