from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from app.api.admins.routes import router as admins_router
from app.api.check_in.routes import router as check_in_router
from app.api.guests.routes import router as guests_router
from app.api.members.routes import router as members_router
from app.api.stats.routes import router as stats_router
from app.core import models  # noqa: F401
from app.core.config import Environment, settings
from app.core.database import create_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.ENVIRONMENT != Environment.TEST:
        create_db()
    yield


app = FastAPI(title='Launchpad Attendance', lifespan=lifespan)

# Include routers
app.include_router(admins_router, prefix='/admins', tags=['Admins'])
app.include_router(check_in_router, prefix='/check-in', tags=['Check In'])
app.include_router(guests_router, prefix='/guests', tags=['Guests'])
app.include_router(members_router, prefix='/members', tags=['Members'])
app.include_router(stats_router, prefix='/stats', tags=['Stats'])

origins = ['*']
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.get('/', include_in_schema=False)
def ping():
    return Response(status_code=200)
