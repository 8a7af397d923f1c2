from fastapi import FastAPI

from .api import nvme

app = FastAPI(title="NVMe Munin Plugin")

app.include_router(nvme.router, prefix="/nvme", tags=["nvme"])
