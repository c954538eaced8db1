from typing import Optional

import requests
from pydantic import BaseModel

from app.api.check_in.schemas import CheckOutResponse, SessionStatusResponse
from app.core.config import settings
from app.core.logger import logger

from .reminder import CheckoutReminder
from .storage import KioskSession, LocalStorage, SessionStore, StoredAdminSession

GENERIC_ERROR = 'An error occurred. Please try again.'
CHECK_OUT_ERROR = 'An error occurred during check-out. Please try again.'
MISSING_FIELDS = 'Please fill in all fields'
NO_SESSION = 'No active check-in session'


class KioskError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CheckInResult(BaseModel):
    session: Optional[KioskSession] = None
    guest_registration_required: bool = False
    already_checked_in: bool = False


def _error_detail(response: requests.Response) -> str:
    try:
        detail = response.json().get('detail')
    except ValueError:
        return GENERIC_ERROR
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list) and detail:
        # pydantic validation errors
        msg = detail[0].get('msg', '')
        return msg.removeprefix('Value error, ') or GENERIC_ERROR
    return GENERIC_ERROR


class KioskClient:
    """
    Client for the check-in kiosk and the admin console.

    Keeps the current check-in session and the admin session in local
    storage, and drives the checkout reminder.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        store: Optional[SessionStore] = None,
        reminder: Optional[CheckoutReminder] = None,
        timeout: int = 10,
    ):
        self.base_url = (base_url or settings.KIOSK_API_URL).rstrip('/')
        self.store = store or SessionStore(LocalStorage(settings.KIOSK_STORAGE_PATH))
        self.reminder = reminder or CheckoutReminder(self.store)
        self.timeout = timeout

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> dict:
        url = f'{self.base_url}{path}'
        try:
            if method == 'GET':
                response = requests.get(url, headers=headers, timeout=self.timeout)
            else:
                response = requests.post(
                    url, json=json, headers=headers, timeout=self.timeout
                )
        except requests.exceptions.RequestException as e:
            logger.error('Request to %s failed: %s', url, e)
            raise KioskError(GENERIC_ERROR) from e

        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.error('%s %s returned %s: %s', method, path, response.status_code, detail)
            raise KioskError(detail, status_code=response.status_code)
        return response.json()

    def _save_check_in(self, data: dict) -> CheckInResult:
        if not data.get('success'):
            return CheckInResult(
                guest_registration_required=data.get('guest_registration_required', False)
            )
        session = KioskSession(**data['session'], token=data['token'])
        self.store.save_session(session)
        return CheckInResult(session=session)

    def check_in(self, usn: str) -> CheckInResult:
        existing = self.store.get_session()
        if existing:
            logger.info('User %s already has an open session', existing.user_id)
            return CheckInResult(session=existing, already_checked_in=True)

        usn = (usn or '').strip()
        if not usn:
            raise KioskError('USN is required')
        data = self._request('POST', '/check-in/', json={'usn': usn})
        return self._save_check_in(data)

    def register_guest(
        self, usn: str, full_name: str, phone_number: str, purpose: str
    ) -> CheckInResult:
        fields = {
            'usn': (usn or '').strip(),
            'full_name': (full_name or '').strip(),
            'phone_number': (phone_number or '').strip(),
            'purpose': (purpose or '').strip(),
        }
        if not all(fields.values()):
            raise KioskError(MISSING_FIELDS)
        data = self._request('POST', '/check-in/guest', json=fields)
        return self._save_check_in(data)

    def _session_headers(self) -> dict:
        session = self.store.get_session()
        if not session:
            raise KioskError(NO_SESSION, status_code=401)
        return {'x-session-token': session.token}

    def status(self) -> SessionStatusResponse:
        data = self._request('GET', '/check-in/status', headers=self._session_headers())
        return SessionStatusResponse(**data)

    def check_out(self) -> CheckOutResponse:
        headers = self._session_headers()
        try:
            data = self._request('POST', '/check-in/check-out', headers=headers)
        except KioskError as e:
            # The local session stays so the user can retry
            raise KioskError(CHECK_OUT_ERROR, status_code=e.status_code) from e

        self.reminder.disable()
        self.store.clear_session()
        response = CheckOutResponse(**data)
        logger.info(
            'Checked out %s after %s minutes',
            response.session.user_id,
            response.duration_minutes,
        )
        return response

    def enable_reminder(self) -> bool:
        session = self.store.get_session()
        if not session:
            raise KioskError(NO_SESSION, status_code=401)
        return self.reminder.enable(session.check_in_time)

    def restore_reminder(self) -> bool:
        session = self.store.get_session()
        if not session:
            return False
        return self.reminder.restore(session.check_in_time)

    def admin_login(self, email: str, password: str) -> StoredAdminSession:
        email = (email or '').strip()
        if not email or not password:
            raise KioskError(MISSING_FIELDS)
        data = self._request(
            'POST', '/admins/login', json={'email': email, 'password': password}
        )
        session = StoredAdminSession(**data['admin'], access_token=data['access_token'])
        self.store.save_admin_session(session)
        return session

    def admin_logout(self) -> None:
        self.store.clear_admin_session()
