from datetime import timedelta, timezone
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ValidationError

from app.api.check_in.schemas import SessionData
from app.core.config import settings
from app.core.exceptions.auth_exceptions import SessionExpired
from app.core.logger import logger
from app.core.utils import current_time


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    admin_id: int
    email: str
    club: str


# Constants
ALGORITHM = 'HS256'
SESSION_TOKEN_TYPE = 'attendance_session'

# System token used for internal operations (seed scripts, cross-club reads)
# admin_id=0 represents a system-level operation rather than a real admin
SYSTEM_TOKEN = TokenData(admin_id=0, email='', club='')

# OAuth2 scheme
oauth2_scheme = OAuth2PasswordBearer(tokenUrl='admins/login')


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    now = current_time()
    to_encode['iat'] = now.replace(tzinfo=timezone.utc)
    if expires_delta:
        to_encode['exp'] = (now + expires_delta).replace(tzinfo=timezone.utc)

    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


async def get_current_admin(token: str = Depends(oauth2_scheme)) -> TokenData:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail='Could not validate credentials',
        headers={'WWW-Authenticate': 'Bearer'},
    )

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.error('Token has expired')
        raise SessionExpired()
    except JWTError as e:
        logger.error('Error decoding token: %s', str(e))
        raise credentials_exception

    admin_id: int = payload.get('admin_id')
    email: str = payload.get('email')
    club: str = payload.get('club')
    if admin_id is None or email is None or club is None:
        logger.error('Invalid token payload: %s', payload)
        raise credentials_exception

    return TokenData(admin_id=admin_id, email=email, club=club)


def create_session_token(session: SessionData) -> str:
    data = {'typ': SESSION_TOKEN_TYPE, 'session': session.model_dump(mode='json')}
    return create_access_token(data)


def decode_session_token(token: str) -> SessionData:
    invalid_session = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail='No active check-in session',
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.error('Error decoding session token: %s', str(e))
        raise invalid_session

    if payload.get('typ') != SESSION_TOKEN_TYPE:
        logger.error('Token is not a check-in session: %s', payload.get('typ'))
        raise invalid_session
    try:
        return SessionData.model_validate(payload.get('session'))
    except ValidationError as e:
        logger.error('Invalid session payload: %s', str(e))
        raise invalid_session


def get_check_in_session(x_session_token: str = Header(...)) -> SessionData:
    return decode_session_token(x_session_token)
